"""Payment domain service."""

from datetime import date
from typing import Optional

from milkledger.domain.entities import Category, Payment, new_id, payment_type_for
from milkledger.domain.errors import NotFoundError, ValidationError, entry_not_found
from milkledger.domain.person import PersonService, parse_category
from milkledger.domain.sync import SyncCoordinator


class PaymentService:
    """Service for managing payments."""

    def __init__(self, context: SyncCoordinator):
        """Initialize payment service.

        Args:
            context: Sync coordinator of the signed-in owner
        """
        self.context = context
        self.person_service = PersonService(context)

    def record_payment(
        self, person_id: str, payment_date: date, amount: float, comment: str = ""
    ) -> Payment:
        """Record a payment to or from a person.

        The payment takes the person's business line; village payments are
        given, city and dairy payments are received.

        Raises:
            NotFoundError: If the person does not exist
            ValidationError: If the amount is not positive
        """
        person = self.person_service.require_person(person_id)
        if amount <= 0:
            raise ValidationError("Payment amount must be positive")
        payment = Payment(
            id=new_id(),
            person_id=person.id,
            person_name=person.name,
            date=payment_date,
            amount=float(amount),
            comment=(comment or "").strip(),
            type=payment_type_for(person.category),
            category=person.category,
        )
        return self.context.add_payment(payment)

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        """Get payment by ID."""
        for payment in self.context.data.payments:
            if payment.id == payment_id:
                return payment
        return None

    def require_payment(self, payment_id: str) -> Payment:
        """Get payment by ID, raising if missing.

        Raises:
            NotFoundError: If no payment has this ID
        """
        payment = self.get_payment(payment_id)
        if payment is None:
            raise NotFoundError(entry_not_found("payment", payment_id))
        return payment

    def list_payments(
        self,
        category: Optional[Category | str] = None,
        on_date: Optional[date] = None,
        person_id: Optional[str] = None,
    ) -> list[Payment]:
        """List payments sorted by date, with optional filters."""
        payments = list(self.context.data.payments)
        if category is not None:
            wanted = parse_category(category)
            payments = [p for p in payments if p.category is wanted]
        if on_date is not None:
            payments = [p for p in payments if p.date == on_date]
        if person_id is not None:
            payments = [p for p in payments if p.person_id == person_id]
        return sorted(payments, key=lambda p: (p.date, p.person_name.lower()))

    def update_payment(
        self,
        payment_id: str,
        person_id: Optional[str] = None,
        amount: Optional[float] = None,
        comment: Optional[str] = None,
    ) -> Payment:
        """Edit a payment.

        Moving a payment to another person also moves it to that person's
        business line.

        Raises:
            NotFoundError: If the payment or the new person does not exist
            ValidationError: If the amount is not positive
        """
        self.require_payment(payment_id)
        changes = {}
        if person_id is not None:
            person = self.person_service.require_person(person_id)
            changes.update(
                person_id=person.id,
                person_name=person.name,
                type=payment_type_for(person.category),
                category=person.category,
            )
        if amount is not None:
            if amount <= 0:
                raise ValidationError("Payment amount must be positive")
            changes["amount"] = float(amount)
        if comment is not None:
            changes["comment"] = comment.strip()
        if not changes:
            return self.require_payment(payment_id)
        return self.context.update_payment(payment_id, **changes)

    def delete_payment(self, payment_id: str) -> None:
        """Delete a payment.

        Raises:
            NotFoundError: If the payment does not exist
        """
        self.require_payment(payment_id)
        self.context.delete_payment(payment_id)
