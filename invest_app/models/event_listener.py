from datetime import date

from sqlalchemy import event

from .models import ContactOwnerMessage, Holding
from .utils import calculate_maturity, calculate_monthly_earning


@event.listens_for(Holding, "before_insert")
def set_holding_defaults(mapper, connection, target: Holding):
    if not target.purchase_date:
        target.purchase_date = date.today()
    if target.lock_in_months is None:
        target.lock_in_months = 3
    if not target.maturity_date:
        target.maturity_date = calculate_maturity(
            target.purchase_date, target.lock_in_months
        )
    if not target.monthly_earning:
        target.monthly_earning = calculate_monthly_earning(target.amount_invested)


@event.listens_for(ContactOwnerMessage, "before_insert")
@event.listens_for(ContactOwnerMessage, "before_update")
def strip_message_text(mapper, connection, target: ContactOwnerMessage):
    if target.subject:
        target.subject = target.subject.strip()
    if target.message:
        target.message = target.message.strip()
