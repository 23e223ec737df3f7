"""
Order lifecycle operations shared by the customer and admin endpoints.
"""
import logging

from django.db import transaction

from .models import Order, OrderItem, OrderStatusHistory
from .status_machine import ensure_transition
from .storage import DocumentStorage, DocumentUploadError
from .validators import OrderValidationError, clean_order_submission

logger = logging.getLogger(__name__)


def _notify(description, func, *args):
    """
    Run a notification write without letting its failure reach the caller.
    The write gets its own savepoint so a database error does not poison an
    enclosing transaction.
    """
    try:
        with transaction.atomic():
            return func(*args)
    except Exception:
        logger.exception(f"Failed to {description}")
        return None


class OrderService:
    """Service for creating and updating orders"""

    @staticmethod
    def create_order(user, data, files=None):
        """
        Validate a submission and persist the order with its items.

        Returns:
            (order, document_errors) where document_errors lists the
            documents that could not be stored

        Raises:
            OrderValidationError when the submission is invalid
        """
        from notifications.services import NotificationService

        cleaned, errors = clean_order_submission(data, files)
        if errors:
            raise OrderValidationError(errors)

        items = cleaned.pop('items')
        documents = cleaned.pop('documents')

        with transaction.atomic():
            order = Order.objects.create(user=user, **cleaned)
            OrderItem.objects.bulk_create([OrderItem(order=order, **item) for item in items])

        logger.info(f"Order {order.get_reference()} created by {user.email} ({len(items)} items, total {order.total_amount})")

        document_errors = OrderService.attach_documents(order, documents)

        _notify(
            f"notify admins about order {order.id}",
            NotificationService.notify_admins_new_order, order
        )

        return order, document_errors

    @staticmethod
    def attach_documents(order, documents):
        """
        Store validated documents and record their URLs on the order.
        Failures are reported back rather than undoing the order.
        """
        failed = []
        update_fields = []
        for field_name, upload in documents.items():
            try:
                url = DocumentStorage.upload(order, field_name, upload)
            except DocumentUploadError as e:
                failed.append({'field': field_name, 'code': 'upload_failed', 'message': str(e)})
                continue
            setattr(order, f'{field_name}_url', url)
            update_fields.append(f'{field_name}_url')

        if update_fields:
            order.save(update_fields=update_fields + ['updated_at'])

        return failed

    @staticmethod
    def transition_status(order, new_status, changed_by=None, reason=''):
        """
        Move an order to one of its offered statuses, record the change and
        notify the owner.

        Raises:
            InvalidStatusTransition when new_status is not offered
        """
        from notifications.services import NotificationService

        with transaction.atomic():
            order = Order.objects.select_for_update().get(pk=order.pk)
            old_status = order.status
            ensure_transition(old_status, new_status)

            order.status = new_status
            order.save(update_fields=['status', 'updated_at'])

            OrderStatusHistory.objects.create(
                order=order,
                old_status=old_status,
                new_status=new_status,
                changed_by=changed_by,
                reason=reason,
            )

        logger.info(f"Order {order.get_reference()} status changed: {old_status} -> {new_status}")

        _notify(
            f"notify owner about status change of order {order.id}",
            NotificationService.notify_owner_status_changed, order, new_status
        )

        return order

    @staticmethod
    def delete_order(order, deleted_by=None):
        reference = order.get_reference()
        order.delete()
        logger.info(f"Order {reference} deleted by {deleted_by.email if deleted_by else 'system'}")
        return reference
