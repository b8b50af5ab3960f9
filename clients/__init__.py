# Infrastructure clients
from clients.vault_client import (
    VaultClient,
    VaultError,
    get_database_url,
    get_email_config,
    get_llm_config,
)
from clients.postgres_client import PostgresClient
from clients.record_store import (
    RecordStore,
    PostgresRecordStore,
    StoreError,
    SchemaMissingError,
    ColumnMissingError,
    PersistenceError,
)
from clients.email_client import EmailGatewayClient, EmailGatewayError
from clients.llm_client import LLMClient, LLMError, LLMResponse
