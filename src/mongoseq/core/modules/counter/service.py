import pydantic
import structlog

from mongoseq.core.db import Document, Store
from mongoseq.core.modules.counter.models import DEFAULT_COLLECTION_NAME, INT64_MAX, INT64_MIN, Counter
from mongoseq.errors import CounterMissingError, InvalidArgumentError, StoreUnavailableError

logger = structlog.get_logger(__name__)


def validate_name(name: str) -> None:
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError("Counter name must be a non-empty string")


def validate_initial_value(initial_value: int) -> None:
    if not isinstance(initial_value, int) or isinstance(initial_value, bool):
        raise InvalidArgumentError("Initial value must be an integer")
    if initial_value < 0:
        raise InvalidArgumentError("Initial value must be greater than or equal to 0")
    if initial_value > INT64_MAX:
        raise InvalidArgumentError("Initial value does not fit a 64-bit integer")


class SequenceCounter:
    """Generates strictly increasing ids from named counters kept in a shared store.

    Holds no counter state of its own: every value comes from the store's atomic
    increment, so any number of instances and processes may share one collection.
    """

    def __init__(
        self,
        store: Store,
        step: int = 1,
        collection_name: str = DEFAULT_COLLECTION_NAME,
        default_initial_value: int = 1,
    ) -> None:
        if store is None:
            raise InvalidArgumentError("Store must not be None")
        if not isinstance(step, int) or isinstance(step, bool):
            raise InvalidArgumentError("Step must be an integer")
        if not INT64_MIN <= step <= INT64_MAX:
            raise InvalidArgumentError("Step does not fit a 64-bit integer")
        validate_initial_value(default_initial_value)

        self._store = store
        self._step = step
        self._collection_name = collection_name or DEFAULT_COLLECTION_NAME
        self._default_initial_value = default_initial_value

    @property
    def step(self) -> int:
        return self._step

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def default_initial_value(self) -> int:
        return self._default_initial_value

    async def generate_id(self, name: str) -> int:
        """Advance the counter by step and return the new value, creating the counter on first use."""
        validate_name(name)

        if not await self.exists(name):
            # Conditional insert: a racing caller that already created and advanced
            # the counter is left untouched
            created = await self._store.insert_if_absent(
                self._collection_name, name, {"value": self._default_initial_value}
            )
            if created:
                logger.debug("counter_initialized", counter=name, value=self._default_initial_value)

        doc = await self._store.atomic_increment(self._collection_name, name, "value", self._step)
        if doc is None:
            raise CounterMissingError(name)

        value = self._parse(doc).value
        logger.debug("id_generated", counter=name, value=value)
        return value

    async def set_initial_value(self, name: str, initial_value: int) -> None:
        """Reset the counter to initial_value, replacing any prior value.

        The next generate_id returns initial_value + step, which may reuse ids
        already handed out if the counter was in use.
        """
        validate_name(name)
        validate_initial_value(initial_value)

        await self._store.upsert(self._collection_name, name, {"value": initial_value})
        logger.info("counter_reset", counter=name, value=initial_value)

    async def exists(self, name: str) -> bool:
        """Check whether a counter record exists for name."""
        validate_name(name)
        return await self._store.find_one(self._collection_name, name) is not None

    async def get_current_value(self, name: str) -> int | None:
        """Get the current value without advancing it, None if the counter does not exist."""
        validate_name(name)
        doc = await self._store.find_one(self._collection_name, name)
        if doc is None:
            return None
        return self._parse(doc).value

    def _parse(self, doc: Document) -> Counter:
        try:
            return Counter.model_validate(doc)
        except pydantic.ValidationError as e:
            raise StoreUnavailableError(f"Malformed counter record in '{self._collection_name}': {e}") from e
