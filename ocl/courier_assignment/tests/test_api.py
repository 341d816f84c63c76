"""
Tests for the assignment ledger endpoints.
"""

import uuid
from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from ..models import AssignedCourier, AssignmentStatus
from .fixtures import make_admin, make_corporate, make_operator, make_courier, make_shipment, make_medicine_booking


class AssignmentAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.admin = make_admin()
        self.client.force_authenticate(user=self.admin)
        self.corporate = make_corporate()
        self.courier = make_courier()
        self.shipment = make_shipment(self.corporate)

    def create_entry(self, **overrides):
        payload = {
            'type': 'corporate',
            'work': 'pickup',
            'corporate_id': str(self.corporate.id),
            'shipment_ids': [str(self.shipment.id)],
        }
        payload.update(overrides)
        return self.client.post('/api/assignments/', payload, format='json')

    def test_create_entry(self):
        response = self.create_entry(courier_id=str(self.courier.id))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        data = response.data['data']
        self.assertEqual(data['status'], AssignmentStatus.ASSIGNED)
        self.assertEqual(data['corporate_info']['corporate_id'], 'A00001')
        self.assertEqual(len(data['orders']), 1)
        self.assertEqual(data['orders'][0]['consignment_number'], self.shipment.consignment_number)

    def test_detail_lists_reachable_statuses(self):
        entry_id = self.create_entry(courier_id=str(self.courier.id)).data['data']['id']

        response = self.client.get(f'/api/assignments/{entry_id}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['next_statuses'], [AssignmentStatus.IN_PROGRESS, AssignmentStatus.CANCELLED])

        self.client.post(f'/api/assignments/{entry_id}/update-status/', {'status': 'cancelled'}, format='json')
        response = self.client.get(f'/api/assignments/{entry_id}/')
        self.assertEqual(response.data['next_statuses'], [])

    def test_create_without_corporate_reports_missing_fields(self):
        response = self.create_entry(corporate_id=None)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error']['code'], 'VALIDATION_ERROR')
        self.assertIn('corporate', response.data['error']['details']['missing_fields'])

    def test_create_with_unknown_shipment(self):
        response = self.create_entry(shipment_ids=[str(uuid.uuid4())])

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error']['code'], 'NOT_FOUND')
        self.assertEqual(AssignedCourier.objects.count(), 0)

    def test_create_without_orders(self):
        response = self.create_entry(shipment_ids=[])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_assign_courier_and_update_status(self):
        entry_id = self.create_entry().data['data']['id']

        response = self.client.post(
            f'/api/assignments/{entry_id}/assign-courier/', {'courier_id': str(self.courier.id)}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], AssignmentStatus.ASSIGNED)

        response = self.client.post(
            f'/api/assignments/{entry_id}/update-status/', {'status': 'in_progress'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['data']['started_at'])

    def test_invalid_transition_is_a_structured_failure(self):
        entry_id = self.create_entry().data['data']['id']

        response = self.client.post(
            f'/api/assignments/{entry_id}/update-status/', {'status': 'completed'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error']['code'], 'INVALID_TRANSITION')

    def test_update_status_of_unknown_entry(self):
        response = self.client.post(
            f'/api/assignments/{uuid.uuid4()}/update-status/', {'status': 'cancelled'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_assign_shipment_and_medicine_delivery(self):
        response = self.client.post('/api/assignments/assign-shipment/', {
            'shipment_id': str(self.shipment.id),
            'courier_id': str(self.courier.id),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['work'], 'pickup')

        booking = make_medicine_booking(make_operator())
        response = self.client.post('/api/assignments/assign-medicine-delivery/', {
            'booking_id': str(booking.id),
            'courier_id': str(self.courier.id),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['type'], 'medicine')
        self.assertEqual(response.data['data']['work'], 'delivery')

    def test_list_filters_by_status(self):
        self.create_entry()
        self.create_entry(courier_id=str(self.courier.id))

        response = self.client.get('/api/assignments/', {'status': 'assigned'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['status'], 'assigned')

    def test_corporate_users_cannot_use_the_ledger(self):
        user = get_user_model().objects.create_user(username='corp', password='testpass123', role='corporate')
        self.client.force_authenticate(user=user)

        response = self.client.get('/api/assignments/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
