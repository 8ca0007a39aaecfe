"""Model base class mapping declarative documents onto a key-value store.

Key layout for a model with prefix ``<namespace>:<collection>``:

- ``prefix:values:<id>``: hash of field -> JSON-encoded value
- ``prefix:keys``: sorted set of ids scored by last save time
- ``prefix:index:<field>``: sorted set of ``<value>:<id>`` members, score 0
- ``prefix:unique:<field>:<value>``: string holding the owning id

Every public operation is one independent unit of work. Writes are sent as
a single batch; nothing is written when validation or a before-hook fails.
There is no locking: concurrent saves of the same id race between reading
the original document and writing the batch, and uniqueness is checked
before the write rather than reserved by it.
"""

import json
import time
import uuid
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Optional

from kvgraph.core.config import get_settings
from kvgraph.core.exceptions import HookAbortedError, NotFoundError, StoreError, ValidationError
from kvgraph.core.hooks.hook_events import HookEvent
from kvgraph.core.hooks.hook_registry import HookRegistry
from kvgraph.core.logging import LoggingContext, get_logger
from kvgraph.domain.entities.field_schema import ID_FIELD, FieldSchema
from kvgraph.domain.entities.hook_context import HookContext
from kvgraph.domain.services.document_validator import (
    check_field,
    is_blank,
    normalize,
    password_is_acceptable,
    password_length_message,
    unique_message,
)
from kvgraph.infrastructure.auth.password_hasher import (
    hash_password,
    needs_rehash,
    verify_password,
)
from kvgraph.infrastructure.persistence.store import Batch, KeyValueStore

if TYPE_CHECKING:
    from graphql import GraphQLField, GraphQLObjectType

logger = get_logger(__name__)

Document = dict[str, Any]

# Upper bound appended to a lexicographic index prefix
_LEX_MAX = "\xff"


def has_value(value: Any) -> bool:
    """Whether a value takes part in unique and index keys."""
    return value is not None and value != ""


def key_token(value: Any) -> str:
    """String form of a value inside a key or index member."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Model:
    """Base class for models persisted in a key-value store.

    Subclasses declare their fields as FieldSchema class attributes. An
    instance is bound to one store and serves every operation of the
    collection.

    Attributes:
        __model_name__: Name used for the GraphQL type and fields. Defaults
            to the lowercased class name.
        __collection__: Collection segment of every key. Defaults to the
            model name followed by "s".
        __fields__: Collected field schemas in declaration order, starting
            with the implicit ``id`` field.

    Example:
        >>> class User(Model):
        ...     __model_name__ = "user"
        ...     __collection__ = "users"
        ...
        ...     email = FieldSchema(required=True, email=True, unique=True, lowercase=True)
        ...     password = FieldSchema(password=True, min_length=6)
        ...     name = FieldSchema(index=True)
        >>>
        >>> users = User(RedisStore.from_url("redis://localhost:6379/0"))
        >>> created = await users.save(None, {"email": "a@b.co", "password": "secret1"})
    """

    __model_name__: ClassVar[str] = ""
    __collection__: ClassVar[str] = ""
    __fields__: ClassVar[dict[str, FieldSchema]] = {"id": ID_FIELD}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        fields = dict(cls.__fields__)
        for name, value in list(vars(cls).items()):
            if isinstance(value, FieldSchema):
                fields[name] = value
                # Keep field names from shadowing model methods
                delattr(cls, name)

        primary = fields.pop("id", ID_FIELD)
        cls.__fields__ = {"id": primary, **fields}

        if "__model_name__" not in vars(cls):
            cls.__model_name__ = cls.__name__.lower()
        if "__collection__" not in vars(cls):
            cls.__collection__ = f"{cls.__model_name__}s"

    def __init__(
        self,
        store: KeyValueStore,
        namespace: Optional[str] = None,
        hook_registry: Optional[HookRegistry] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Bind the model to a store.

        Args:
            store: Store client shared with other models; its lifecycle is
                owned by the caller.
            namespace: Leading key segment. Defaults to Settings.namespace.
            hook_registry: Optional registry of collection-scoped hooks.
            clock: Source of epoch seconds used to score ``prefix:keys``.
        """
        self.store = store
        self.namespace = namespace or get_settings().namespace
        self.hook_registry = hook_registry
        self._clock = clock
        self._object_type: Optional["GraphQLObjectType"] = None
        self._count_type: Optional["GraphQLObjectType"] = None

    @property
    def model_name(self) -> str:
        return self.__model_name__

    @property
    def collection(self) -> str:
        return self.__collection__

    @classmethod
    def fields(cls) -> dict[str, FieldSchema]:
        """Return the field schemas in declaration order."""
        return dict(cls.__fields__)

    def auto_id(self) -> str:
        """Generate a new document id."""
        return str(uuid.uuid4())

    # ------------------------------------------------------------------
    # Key layout
    # ------------------------------------------------------------------

    def prefix(self) -> str:
        return f"{self.namespace}:{self.collection}"

    def values_key(self, document_id: str) -> str:
        return f"{self.prefix()}:values:{document_id}"

    def keys_key(self) -> str:
        return f"{self.prefix()}:keys"

    def index_key(self, field_name: str) -> str:
        return f"{self.prefix()}:index:{field_name}"

    def unique_key(self, field_name: str, value: Any) -> str:
        return f"{self.prefix()}:unique:{field_name}:{key_token(value)}"

    @staticmethod
    def index_member(value: Any, document_id: str) -> str:
        return f"{key_token(value)}:{document_id}"

    # ------------------------------------------------------------------
    # Value codec
    # ------------------------------------------------------------------

    @staticmethod
    def encode(document: Document) -> dict[str, str]:
        """Encode a document into hash fields, leaving out None values."""
        return {name: json.dumps(value) for name, value in document.items() if value is not None}

    @staticmethod
    def decode(raw: dict[str, str]) -> Optional[Document]:
        """Decode hash fields; a hash without an id is a missing document."""
        document: Document = {}
        for name, encoded in raw.items():
            try:
                document[name] = json.loads(encoded)
            except json.JSONDecodeError:
                # Written by something other than this layer
                document[name] = encoded
        if not document.get("id"):
            return None
        return document

    # ------------------------------------------------------------------
    # Overridable hooks
    # ------------------------------------------------------------------

    async def before_create(self, document: Document) -> Document:
        """Transform a validated document before it is first written."""
        return document

    async def before_save(self, document: Document) -> Document:
        """Transform a validated document before an existing one is overwritten."""
        return document

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    async def validate(
        self,
        id: Optional[str],
        candidate: Document,
        original: Optional[Document] = None,
    ) -> Document:
        """Validate a candidate document and prepare it for storage.

        Args:
            id: Id of the document being updated, None on create.
            candidate: Field values submitted by the caller.
            original: Stored document for an update. Fetched when needed
                and not supplied.

        Returns:
            The document holding only declared fields, with transforms
            applied and passwords hashed.

        Raises:
            ValidationError: With every field message, or with every
                uniqueness conflict when the field checks passed.
            StoreError: If the uniqueness lookup fails.
        """
        is_create = id is None
        fields = self.fields()
        data: Document = {}
        errors: list[str] = []
        passwords: dict[str, Any] = {}

        for name, field in fields.items():
            value = normalize(candidate.get(name, field.default_value), field)
            errors.extend(check_field(name, field, value, is_create))

            if is_create and field.auto_id:
                continue
            if field.password:
                passwords[name] = value
                continue
            data[name] = value

        if passwords and not is_create and original is None:
            original = await self.get(id)

        for name, raw in passwords.items():
            field = fields[name]
            stored = original.get(name) if original else None

            if not is_create and stored and (is_blank(raw) or raw == stored):
                # Unchanged password, keep the stored hash as is
                data[name] = stored
            elif not is_create and stored and verify_password(str(raw), stored):
                # Same password: only hashes with outdated parameters are replaced
                data[name] = hash_password(str(raw)) if needs_rehash(stored) else stored
            elif password_is_acceptable(raw, field):
                data[name] = hash_password(raw)
            elif is_blank(raw):
                data[name] = None
            elif not is_create:
                # Create-time failures were reported by check_field already
                errors.append(password_length_message(name, field.min_length))

        if errors:
            logger.info(
                "Document validation failed",
                collection=self.collection,
                document_id=id,
                errors=errors,
            )
            raise ValidationError(errors)

        await self._check_unique(id, data)
        return data

    async def _check_unique(self, id: Optional[str], data: Document) -> None:
        checks = [
            (name, data.get(name))
            for name, field in self.fields().items()
            if field.unique and has_value(data.get(name))
        ]
        if not checks:
            return

        batch = self.store.batch()
        for name, value in checks:
            batch.get(self.unique_key(name, value))
        result = await batch.execute()

        conflicts = [
            unique_message(name)
            for (name, _), owner in zip(checks, result.results)
            if owner and owner != id
        ]
        if conflicts:
            logger.info(
                "Document uniqueness conflict",
                collection=self.collection,
                document_id=id,
                errors=conflicts,
            )
            raise ValidationError(conflicts)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def save(self, id: Optional[str] = None, document: Optional[Document] = None) -> Document:
        """Create (id is None) or update a document.

        On update, fields absent from ``document`` keep their stored values.

        Returns:
            The persisted document, including its id.

        Raises:
            NotFoundError: If ``id`` is given but no such document exists.
            ValidationError: If validation fails. Nothing is written.
            HookAbortedError: If a registered before-hook aborts. Nothing is written.
            StoreError: If the write batch fails. Commands that already ran
                are not rolled back.
        """
        with LoggingContext(collection=self.collection):
            return await self._save(id, document)

    async def _save(self, id: Optional[str], document: Optional[Document]) -> Document:
        candidate = dict(document or {})
        original: Optional[Document] = None

        if id is not None:
            original = await self.get(id)
            if original is None:
                raise NotFoundError(self.model_name, id)
            candidate = {**original, **candidate}

        logger.debug(
            "Saving document",
            collection=self.collection,
            document_id=id,
            is_create=id is None,
        )

        validated = await self.validate(id, candidate, original=original)

        if id is None:
            validated = await self.before_create(validated)
            validated = await self._trigger_before(
                HookEvent.ON_DOCUMENT_BEFORE_CREATE, validated, None
            )
        else:
            validated = await self.before_save(validated)
            validated = await self._trigger_before(
                HookEvent.ON_DOCUMENT_BEFORE_UPDATE, validated, id
            )

        document_id = id or self.auto_id()
        validated["id"] = document_id

        batch = self._save_batch(document_id, validated, original)
        try:
            await batch.execute()
        except StoreError:
            logger.exception(
                "Failed to save document",
                collection=self.collection,
                document_id=document_id,
            )
            raise

        logger.info(
            "Document created" if original is None else "Document updated",
            collection=self.collection,
            document_id=document_id,
        )

        await self._trigger_after(HookEvent.ON_DOCUMENT_AFTER_SAVE, validated, document_id)
        return validated

    def _save_batch(
        self, document_id: str, document: Document, original: Optional[Document]
    ) -> Batch:
        batch = self.store.batch()

        for name, field in self.fields().items():
            if field.primary:
                continue
            new_value = document.get(name)
            old_value = original.get(name) if original else None

            if field.unique:
                if has_value(old_value):
                    batch.delete(self.unique_key(name, old_value))
                if has_value(new_value):
                    batch.set(self.unique_key(name, new_value), document_id)

            if field.index:
                if has_value(old_value):
                    batch.zrem(self.index_key(name), self.index_member(old_value, document_id))
                if has_value(new_value):
                    batch.zadd(self.index_key(name), 0, self.index_member(new_value, document_id))

        if original is not None:
            batch.delete(self.values_key(document_id))
        batch.hset(self.values_key(document_id), self.encode(document))
        batch.zadd(self.keys_key(), self._clock(), document_id)
        return batch

    async def delete(self, id: str) -> str:
        """Delete a document with its unique keys and index entries.

        Returns:
            The deleted id.

        Raises:
            NotFoundError: If the document does not exist. Nothing is written.
            HookAbortedError: If a registered before-hook aborts.
            StoreError: If the batch fails.
        """
        with LoggingContext(collection=self.collection):
            return await self._delete(id)

    async def _delete(self, id: str) -> str:
        document = await self.get(id)
        if document is None:
            raise NotFoundError(self.model_name, id)

        await self._trigger_before(HookEvent.ON_DOCUMENT_BEFORE_DELETE, document, id)

        batch = self.store.batch()
        for name, field in self.fields().items():
            value = document.get(name)
            if field.primary or not has_value(value):
                continue
            if field.index:
                batch.zrem(self.index_key(name), self.index_member(value, id))
            if field.unique:
                batch.delete(self.unique_key(name, value))
        batch.zrem(self.keys_key(), id)
        batch.delete(self.values_key(id))

        try:
            await batch.execute()
        except StoreError:
            logger.exception("Failed to delete document", collection=self.collection, document_id=id)
            raise

        logger.info("Document deleted", collection=self.collection, document_id=id)
        await self._trigger_after(HookEvent.ON_DOCUMENT_AFTER_DELETE, document, id)
        return id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, id: str) -> Optional[Document]:
        """Fetch a document by id, None when it does not exist."""
        raw = await self.store.hgetall(self.values_key(id))
        return self.decode(raw)

    async def find(self, limit: int = 50, skip: int = 0) -> list[Document]:
        """List documents, most recently saved first.

        Documents whose value fetch fails, or that disappeared between
        reading the id window and fetching the values, are left out of the
        result instead of failing the whole listing.

        Args:
            limit: Maximum number of documents.
            skip: Number of documents to skip from the newest.
        """
        ids = await self.store.zrevrangebyscore(self.keys_key(), "+inf", "-inf", skip, limit)
        return await self._fetch_many(ids)

    async def count(self) -> int:
        """Number of documents in the collection."""
        return await self.store.zcount(self.keys_key(), "-inf", "+inf") or 0

    async def find_by(self, field_name: str, value: Any) -> list[Document]:
        """List documents whose indexed field holds ``value``.

        Raises:
            ValueError: If the field is not a secondary-indexed field.
        """
        field = self.fields().get(field_name)
        if field is None or not field.index or field.primary:
            raise ValueError(f"{self.model_name}.{field_name} is not an indexed field")

        token = key_token(normalize(value, field))
        members = await self.store.zrangebylex(
            self.index_key(field_name), f"[{token}:", f"[{token}:{_LEX_MAX}"
        )
        ids = []
        for member in members:
            member_value, _, document_id = member.rpartition(":")
            if member_value == token:
                ids.append(document_id)
        return await self._fetch_many(ids)

    async def get_by_unique(self, field_name: str, value: Any) -> Optional[Document]:
        """Fetch the document owning a unique field value.

        Raises:
            ValueError: If the field is not unique.
        """
        field = self.fields().get(field_name)
        if field is None or not field.unique:
            raise ValueError(f"{self.model_name}.{field_name} is not a unique field")

        owner = await self.store.get(self.unique_key(field_name, normalize(value, field)))
        if not owner:
            return None
        return await self.get(owner)

    async def _fetch_many(self, ids: list[str]) -> list[Document]:
        if not ids:
            return []

        batch = self.store.batch()
        for document_id in ids:
            batch.hgetall(self.values_key(document_id))
        result = await batch.execute(raise_on_error=False)

        documents = []
        for document_id, reply in zip(ids, result.results):
            if isinstance(reply, StoreError):
                logger.warning(
                    "Dropping document from listing",
                    collection=self.collection,
                    document_id=document_id,
                    error=str(reply),
                )
                continue
            document = self.decode(reply)
            if document is None:
                logger.warning(
                    "Dropping missing document from listing",
                    collection=self.collection,
                    document_id=document_id,
                )
                continue
            documents.append(document)
        return documents

    # ------------------------------------------------------------------
    # Registered hooks
    # ------------------------------------------------------------------

    def _hook_context(self, document_id: Optional[str]) -> HookContext:
        return HookContext(
            collection=self.collection,
            model_name=self.model_name,
            document_id=document_id,
        )

    async def _trigger_before(
        self, event: str, document: Document, document_id: Optional[str]
    ) -> Document:
        if self.hook_registry is None:
            return document

        result = await self.hook_registry.trigger(
            event=event,
            data=document,
            context=self._hook_context(document_id),
            filters={"collection": self.collection},
        )
        if result.aborted:
            raise HookAbortedError(event, result.abort_message or f"{event} aborted")
        if not result.success:
            raise HookAbortedError(event, "; ".join(result.errors))
        return result.data if result.data is not None else document

    async def _trigger_after(self, event: str, document: Document, document_id: str) -> None:
        if self.hook_registry is None:
            return

        result = await self.hook_registry.trigger(
            event=event,
            data=document,
            context=self._hook_context(document_id),
            filters={"collection": self.collection},
        )
        if result.errors:
            logger.warning(
                "After-hooks reported errors",
                hook_event=event,
                collection=self.collection,
                document_id=document_id,
                errors=result.errors,
            )

    # ------------------------------------------------------------------
    # Query layer
    # ------------------------------------------------------------------

    def schema(self) -> "GraphQLObjectType":
        """GraphQL object type of the model, built once per instance."""
        from kvgraph.infrastructure.graphql.model_fields import build_object_type

        if self._object_type is None:
            self._object_type = build_object_type(self)
        return self._object_type

    def count_schema(self) -> "GraphQLObjectType":
        """GraphQL type of the count query, built once per instance."""
        from kvgraph.infrastructure.graphql.model_fields import build_count_type

        if self._count_type is None:
            self._count_type = build_count_type(self)
        return self._count_type

    def query(self) -> dict[str, "GraphQLField"]:
        """GraphQL query fields: one document, paged list and count."""
        from kvgraph.infrastructure.graphql.model_fields import build_query_fields

        return build_query_fields(self)

    def mutation(self) -> dict[str, "GraphQLField"]:
        """GraphQL mutation fields: create, update and delete."""
        from kvgraph.infrastructure.graphql.model_fields import build_mutation_fields

        return build_mutation_fields(self)
