"""
Shared record builders for ledger tests.
"""

from decimal import Decimal
from django.contrib.auth import get_user_model

from bookings.models import (
    CorporateClient, MedicineOperator, CourierBoy, CourierBoyStatus,
    FreightShipment, MedicineBooking
)

_counter = {'consignment': 880000}


def next_consignment():
    _counter['consignment'] += 1
    return _counter['consignment']


def make_admin(username='admin'):
    return get_user_model().objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='testpass123',
        role='admin'
    )


def make_corporate(code='A00001', name='Brahmaputra Traders', state='Assam', email='accounts@bt.example'):
    return CorporateClient.objects.create(
        corporate_code=code,
        company_name=name,
        company_address='GS Road, Guwahati',
        gst_number='18ABCDE1234F1Z5',
        state=state,
        contact_number='9876543210',
        email=email,
    )


def make_operator(name='Kamrup Pharma'):
    return MedicineOperator.objects.create(name=name, email='ops@kamrup.example', phone='9123456780')


def make_courier(name='Ravi Das', status=CourierBoyStatus.APPROVED):
    return CourierBoy.objects.create(
        full_name=name,
        phone='9000000001',
        email='ravi@example.com',
        area='Dispur',
        status=status,
    )


def make_shipment(corporate, freight='500.00', booking_date=None, **kwargs):
    data = {
        'corporate': corporate,
        'consignment_number': next_consignment(),
        'booking_reference': f'BK-{_counter["consignment"]}',
        'booking_data': {
            'originData': {'city': 'Guwahati', 'name': corporate.company_name},
            'destinationData': {'city': 'Shillong', 'name': 'Receiver'},
            'shipmentData': {'natureOfConsignment': 'NON-DOX', 'actualWeight': '2.5'},
            'invoiceData': {'invoiceValue': '1200'},
        },
        'freight_charges': Decimal(freight),
        'total_amount': Decimal(freight),
    }
    if booking_date is not None:
        data['booking_date'] = booking_date
    data.update(kwargs)
    return FreightShipment.objects.create(**data)


def make_medicine_booking(operator, grand_total='600', **kwargs):
    data = {
        'operator': operator,
        'consignment_number': next_consignment(),
        'booking_reference': f'MED-{_counter["consignment"]}',
        'origin': {'name': operator.name, 'city': 'Guwahati'},
        'destination': {'name': 'City Hospital', 'city': 'Tezpur'},
        'shipment': {'chargeableWeight': '3'},
        'charges': {'grandTotal': grand_total},
        'billing': {'partyType': 'sender'},
    }
    data.update(kwargs)
    return MedicineBooking.objects.create(**data)
