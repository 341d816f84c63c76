"""
Order sources for ledger entries.

Each assignment type has its own variant carrying exactly the reference and
snapshot fields that type needs. Variants validate themselves on
construction, so a ledger entry can only be created from a complete source.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Tuple

from bookings.models import CorporateClient, MedicineOperator, FreightShipment, MedicineBooking

from .exceptions import ValidationException
from .models import AssignmentType, WorkType


def _missing(obj, names) -> list:
    return [name for name in names if not getattr(obj, name)]


def _check_work(work: str) -> None:
    if work not in WorkType.values:
        raise ValidationException(
            f"Unknown work type '{work}'",
            {"work": f"must be one of {', '.join(WorkType.values)}"}
        )


@dataclass(frozen=True)
class OrderLine:
    """A single order handed to a courier, with its booking snapshots."""

    consignment_number: int
    booking_reference: str
    shipment: Optional[FreightShipment] = None
    medicine_booking: Optional[MedicineBooking] = None
    origin_data: Dict[str, Any] = field(default_factory=dict)
    destination_data: Dict[str, Any] = field(default_factory=dict)
    shipment_data: Dict[str, Any] = field(default_factory=dict)
    invoice_data: Dict[str, Any] = field(default_factory=dict)
    charges_data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        references = [ref for ref in (self.shipment, self.medicine_booking) if ref is not None]
        if len(references) != 1:
            raise ValidationException(
                "Order line must reference exactly one of a shipment or a medicine booking",
                {"references": len(references)}
            )
        missing = _missing(self, ('consignment_number', 'booking_reference'))
        if missing:
            raise ValidationException(
                f"Order line is missing {', '.join(missing)}",
                {"missing_fields": missing}
            )

    @classmethod
    def from_shipment(cls, shipment: FreightShipment) -> 'OrderLine':
        return cls(
            consignment_number=shipment.consignment_number,
            booking_reference=shipment.booking_reference,
            shipment=shipment,
            origin_data=deepcopy(shipment.section('originData')),
            destination_data=deepcopy(shipment.section('destinationData')),
            shipment_data=deepcopy(shipment.section('shipmentData')),
            invoice_data=deepcopy(shipment.section('invoiceData')),
        )

    @classmethod
    def from_medicine_booking(cls, booking: MedicineBooking) -> 'OrderLine':
        return cls(
            consignment_number=booking.consignment_number,
            booking_reference=booking.booking_reference,
            medicine_booking=booking,
            origin_data=deepcopy(booking.origin or {}),
            destination_data=deepcopy(booking.destination or {}),
            shipment_data=deepcopy(booking.shipment or {}),
            charges_data=deepcopy(booking.charges or {}),
        )

    def model_fields(self) -> Dict[str, Any]:
        return {
            'shipment': self.shipment,
            'medicine_booking': self.medicine_booking,
            'consignment_number': self.consignment_number,
            'booking_reference': self.booking_reference,
            'origin_data': self.origin_data,
            'destination_data': self.destination_data,
            'shipment_data': self.shipment_data,
            'invoice_data': self.invoice_data,
            'charges_data': self.charges_data,
        }


@dataclass(frozen=True)
class CorporateSource:
    """Corporate freight picked up on behalf of a registered corporate client."""

    type: ClassVar[str] = AssignmentType.CORPORATE
    required_fields: ClassVar[Tuple[str, ...]] = (
        'corporate', 'corporate_code', 'company_name', 'email', 'contact_number'
    )

    corporate: Optional[CorporateClient]
    corporate_code: str = ''
    company_name: str = ''
    email: str = ''
    contact_number: str = ''
    work: str = WorkType.PICKUP

    def __post_init__(self):
        _check_work(self.work)
        missing = _missing(self, self.required_fields)
        if missing:
            raise ValidationException(
                f"{self.type} assignment is missing {', '.join(missing)}",
                {"missing_fields": missing}
            )

    @classmethod
    def from_corporate(cls, corporate: CorporateClient, work: str = WorkType.PICKUP):
        return cls(
            corporate=corporate,
            corporate_code=corporate.corporate_code,
            company_name=corporate.company_name,
            email=(corporate.email or '').strip().lower(),
            contact_number=corporate.contact_number,
            work=work,
        )

    def accepts(self, line: OrderLine) -> bool:
        return line.shipment is not None and line.shipment.corporate_id == self.corporate.id

    def entry_fields(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'work': self.work,
            'corporate': self.corporate,
            'corporate_info': {
                'corporate_id': self.corporate_code,
                'company_name': self.company_name,
                'email': self.email,
                'contact_number': self.contact_number,
            },
        }


@dataclass(frozen=True)
class OfficeUserSource(CorporateSource):
    """Corporate freight booked at the counter by an office user."""

    type: ClassVar[str] = AssignmentType.OFFICE_USER
    required_fields: ClassVar[Tuple[str, ...]] = ('corporate', 'corporate_code', 'company_name')


@dataclass(frozen=True)
class CourierBoySource(CorporateSource):
    """Corporate freight booked in the field by a courier boy."""

    type: ClassVar[str] = AssignmentType.COURIER_BOY
    required_fields: ClassVar[Tuple[str, ...]] = ('corporate', 'corporate_code', 'company_name')


@dataclass(frozen=True)
class MedicineSource:
    """
    Medicine bookings of one operator.

    The operator snapshot is only required when the courier has to meet the
    operator, i.e. for pickup and pickup-and-delivery work.
    """

    type: ClassVar[str] = AssignmentType.MEDICINE

    operator: Optional[MedicineOperator]
    work: str = WorkType.PICKUP
    name: str = ''
    email: str = ''
    phone: str = ''

    def __post_init__(self):
        _check_work(self.work)
        required = ['operator']
        if self.work != WorkType.DELIVERY:
            required += ['name', 'email', 'phone']
        missing = _missing(self, required)
        if missing:
            raise ValidationException(
                f"{self.type} assignment is missing {', '.join(missing)}",
                {"missing_fields": missing}
            )

    @classmethod
    def from_operator(cls, operator: MedicineOperator, work: str = WorkType.PICKUP):
        return cls(
            operator=operator,
            work=work,
            name=operator.name,
            email=(operator.email or '').strip().lower(),
            phone=operator.phone,
        )

    def accepts(self, line: OrderLine) -> bool:
        return (
            line.medicine_booking is not None
            and line.medicine_booking.operator_id == self.operator.id
        )

    def entry_fields(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'work': self.work,
            'medicine_operator': self.operator,
            'medicine_user_info': {
                'name': self.name,
                'email': self.email,
                'phone': self.phone,
            },
        }


SOURCE_TYPES = {
    AssignmentType.CORPORATE: CorporateSource,
    AssignmentType.OFFICE_USER: OfficeUserSource,
    AssignmentType.COURIER_BOY: CourierBoySource,
    AssignmentType.MEDICINE: MedicineSource,
}


def build_source(assignment_type: str, entity, work: str = WorkType.PICKUP):
    """
    Build the source variant for ``assignment_type`` from a live billing
    entity record, snapshotting its display fields. A missing entity fails
    the variant's own validation.
    """
    variant = SOURCE_TYPES.get(assignment_type)
    if variant is None:
        raise ValidationException(
            f"Unknown assignment type '{assignment_type}'",
            {"type": f"must be one of {', '.join(AssignmentType.values)}"}
        )
    if entity is None:
        return variant(None, work=work)
    if variant is MedicineSource:
        return MedicineSource.from_operator(entity, work)
    return variant.from_corporate(entity, work)
