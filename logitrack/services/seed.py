"""
Default records created on first start
"""
from logitrack.api.auth import get_password_hash
from logitrack.config import get_settings
from logitrack.models.user import UserRole
from logitrack.services.storage import Storage
from logitrack.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

SAMPLE_CLIENTS = [
    {
        "name": "Acme Corp",
        "email": "contact@acmecorp.com",
        "phone": "+1234567890",
        "address": "123 Business St, New York, NY",
        "country": "USA",
    },
    {
        "name": "Global Industries",
        "email": "info@globalind.com",
        "phone": "+9876543210",
        "address": "456 Corporate Ave, Berlin",
        "country": "Germany",
    },
]


async def seed_defaults(storage: Storage, sample_data: bool = settings.SEED_SAMPLE_DATA) -> None:
    """Create the default admin and sample clients if they are missing"""
    if not await storage.get_user_by_username(settings.DEFAULT_ADMIN_USERNAME):
        await storage.create_user({
            "username": settings.DEFAULT_ADMIN_USERNAME,
            "email": settings.DEFAULT_ADMIN_EMAIL,
            "full_name": "System Administrator",
            "hashed_password": get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
            "role": UserRole.ADMIN,
        })
        logger.info("Created default admin user")

    if sample_data and not await storage.list_clients():
        for client in SAMPLE_CLIENTS:
            await storage.create_client(client)
        logger.info(f"Seeded {len(SAMPLE_CLIENTS)} sample clients")
