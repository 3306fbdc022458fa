from datetime import date, datetime  # For timestamp and birth date fields
from typing import Optional  # For optional fields
from uuid import UUID, uuid4  # For account, event and token identifiers

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, Uuid  # Explicit column types
from sqlmodel import Column, Field, Index, SQLModel  # For ORM and table definition

from src.utils.clock import utc_now


def normalize_email(email: str) -> str:
    """Lowercases and trims an email address.

    Every read and write keyed by email goes through this function so lookups
    are case-insensitive without relying on database collation.
    """
    return email.strip().lower()


class Account(SQLModel, table=True):
    """Represents an Account entity and acts as an Aggregate Root.

    An account is either authenticated locally (it has a password hash), linked
    to an external identity provider (it has a provider identity), or both. It
    is never neither.

    Attributes:
        id: The unique identifier for the account.
        email: Lowercase-normalized, unique email address.
        password_hash: bcrypt digest. Null for OAuth-only accounts.
        first_name: Given name.
        last_name: Family name.
        date_of_birth: Optional birth date.
        avatar_url: Optional avatar reference (file storage is external).
        provider: External provider name, e.g. ``google``.
        provider_id: Subject identifier issued by ``provider``.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    __tablename__ = "accounts"  # Explicit table name for clarity

    id: UUID = Field(
        default_factory=uuid4,
        sa_column=Column(Uuid, primary_key=True),
        description="The unique identifier for the account.",
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, index=True, nullable=False),
        description="Unique, lowercase email address.",
    )
    password_hash: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Bcrypt-hashed password. Null for accounts authenticating via OAuth only.",
    )
    first_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="The account holder's given name.",
    )
    last_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="The account holder's family name.",
    )
    date_of_birth: Optional[date] = Field(default=None, description="Optional birth date.")
    avatar_url: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Reference to the account's avatar image.",
    )
    provider: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="External identity provider name.",
    )
    provider_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Subject identifier issued by the external provider.",
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="The timestamp of when the account was created.",
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="The timestamp of the last update to the account.",
    )

    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_accounts_provider_identity"),
        {"extend_existing": True},
    )

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None


class LoginEvent(SQLModel, table=True):
    """An append-only record of a successful sign-in.

    Events are never updated or deleted directly; they disappear only when the
    owning account is deleted.
    """

    __tablename__ = "login_events"

    id: UUID = Field(default_factory=uuid4, sa_column=Column(Uuid, primary_key=True))
    account_id: UUID = Field(
        sa_column=Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key linking the event to its Account.",
    )
    ip_address: Optional[str] = Field(
        default=None,
        sa_column=Column(String(45), nullable=True),
        description="Origin network address.",
    )
    client_descriptor: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Origin client descriptor, typically the User-Agent header.",
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    __table_args__ = (
        Index("ix_login_events_account_id_created_at", "account_id", "created_at"),
        {"extend_existing": True},
    )


class ResetToken(SQLModel, table=True):
    """A single-use, time-bounded secret authorizing one password change.

    A token is valid while ``expires_at`` lies in the future and
    ``consumed_at`` is null. ``consumed_at`` is set once and never cleared.
    """

    __tablename__ = "reset_tokens"

    id: UUID = Field(default_factory=uuid4, sa_column=Column(Uuid, primary_key=True))
    account_id: UUID = Field(
        sa_column=Column(
            Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), index=True, nullable=False
        ),
    )
    secret: str = Field(sa_column=Column(String(64), unique=True, index=True, nullable=False))
    expires_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    consumed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    __table_args__ = (
        UniqueConstraint("account_id", name="uq_reset_tokens_account_id"),
        {"extend_existing": True},
    )
