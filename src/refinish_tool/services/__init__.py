"""Services subpackage - order intake around the pricing engine."""
from .order_store import Order, OrderUpload, OrderStore
from .order_service import OrderService, OrderCreated
from .upload_service import UploadService, UploadRecord
from .email_service import EmailService, OrderEmailData

__all__ = [
    'Order', 'OrderUpload', 'OrderStore',
    'OrderService', 'OrderCreated',
    'UploadService', 'UploadRecord',
    'EmailService', 'OrderEmailData',
]
