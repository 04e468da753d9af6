"""
Vector store configuration settings.

Manages Milvus (production) and FAISS (local development) configuration
for chunk vector storage and similarity search.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from lectern.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """Vector store configuration (FAISS for dev, Milvus for prod)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="milvus",
        description="Vector store type: 'faiss' for local dev, 'milvus' for production",
    )

    # Milvus
    milvus_uri: str = Field(default="http://localhost:19530", description="Milvus server URI")
    milvus_token: str | None = Field(default=None, description="Milvus auth token (user:password)")
    collection_name: str = Field(
        default="study_material_chunks",
        description="Collection holding one vector per chunk",
    )
    embedding_dimension: int = Field(default=768, description="Embedding vector dimension")
    index_type: str = Field(default="HNSW", description="Similarity index type")
    metric_type: str = Field(default="COSINE", description="Similarity metric")
    hnsw_m: int = Field(default=16, description="HNSW graph degree (M)")
    hnsw_ef_construction: int = Field(default=200, description="HNSW efConstruction")
    search_ef: int = Field(default=64, description="HNSW ef used at query time")
    text_max_length: int = Field(
        default=8192,
        description="Maximum stored chunk text length in bytes",
    )
    id_max_length: int = Field(
        default=64,
        description="Maximum length of owner/scope/document id fields",
    )

    # FAISS
    faiss_persist_directory: str | None = Field(
        default=None,
        description="Directory to persist the FAISS index; in-memory when unset",
    )
