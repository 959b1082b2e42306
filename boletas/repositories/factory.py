from boletas.repositories.base import ClientRepository, ReceiptCounter
from boletas.settings import settings


def get_receipt_counter() -> ReceiptCounter:
    from boletas.repositories.json_file import JSONFileCounter

    return JSONFileCounter(
        settings.get_counter_path(),
        reset_on_corruption=settings.counter_reset_on_corruption,
    )


def get_client_repository() -> ClientRepository:
    from boletas.repositories.json_file import JSONFileClientRepository

    return JSONFileClientRepository(settings.get_clients_path())
