from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, DateTime, func, Text
from genuka_auth.core.crypto import get_token_cipher
from genuka_auth.db.base_class import Base

class Company(Base):
    """Tenant authenticated through Genuka OAuth. ``id`` is assigned by Genuka."""

    __tablename__ = "companies"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    handle: Mapped[Optional[str]] = mapped_column(String(255), unique=True, index=True, nullable=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # cifrados em repouso (ver TokenCipher); acessar via access_token / refresh_token
    access_token_encrypted: Mapped[Optional[str]] = mapped_column("access_token", Text, nullable=True)
    refresh_token_encrypted: Mapped[Optional[str]] = mapped_column("refresh_token", Text, nullable=True)
    token_expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    authorization_code: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def access_token(self) -> Optional[str]:
        return get_token_cipher().decrypt(self.access_token_encrypted)

    @access_token.setter
    def access_token(self, value: Optional[str]) -> None:
        self.access_token_encrypted = get_token_cipher().encrypt(value)

    @property
    def refresh_token(self) -> Optional[str]:
        return get_token_cipher().decrypt(self.refresh_token_encrypted)

    @refresh_token.setter
    def refresh_token(self, value: Optional[str]) -> None:
        self.refresh_token_encrypted = get_token_cipher().encrypt(value)

    def __repr__(self) -> str:
        return f"<Company id={self.id!r} handle={self.handle!r}>"
