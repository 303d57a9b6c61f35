"""
Collection Store

Keeps a whole list of records as one JSON value under a single store key
and answers filtered queries over it.

Every operation loads the entire collection, filters or mutates it in
memory and, for writes, stores the entire collection back. There is no
locking between calls: two writers doing read-modify-write on the same
key concurrently can lose one of the updates.
"""

import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .backends.base import ExpireMode, StoreClient
from .errors import CollectionError
from .query.operators import Operator, compose_predicate
from .query.options import FindOptions

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
OptionsLike = Union[FindOptions, Mapping[str, Any]]


class _NotFound:
    """Falsy marker returned by find_one when nothing matches."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


class CollectionStore:
    """
    Record collections on top of a key-value store client.

    The store client only needs async get(key) and
    set(key, value, expire_mode, expires_in); see backends.StoreClient.

    Usage:
        store = CollectionStore(RedisBackend(key_prefix="EX_"))
        await store.save_or_update("users", {"id": 1, "username": "A"}, {"id": 1})
        await store.find("users", {"where": {"username": "A"}})
    """

    def __init__(self, client: StoreClient):
        self.client = client

    async def get_all(self, key: str) -> Optional[List[Record]]:
        """
        Load and deserialize the collection stored under key.

        Returns:
            The stored list, or None if the key is absent
        """
        try:
            raw = await self.client.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as e:
            logger.error(f"Failed to load collection {key}: {e}")
            raise CollectionError(str(e)) from e

    async def memoize(
            self,
            key: str,
            records: Sequence[Record],
            expire_mode: Optional[ExpireMode] = None,
            expires_in: Optional[int] = None,
    ) -> bool:
        """
        Store records as the whole value of key.

        Args:
            key: Store key
            records: List or tuple of records
            expire_mode: Optional ExpireMode.EX / ExpireMode.PX
            expires_in: Expiry duration, used only together with expire_mode

        Returns:
            The store client's success flag

        Raises:
            CollectionError: records is not a list/tuple, is not serializable,
                or the store client failed
        """
        if not isinstance(records, (list, tuple)):
            raise CollectionError("only lists of records can be memoized")

        try:
            payload = json.dumps(list(records))
            if expire_mode is not None and expires_in:
                result = await self.client.set(key, payload, expire_mode, expires_in)
            else:
                result = await self.client.set(key, payload)
            logger.debug(f"Stored {len(records)} records under {key}")
            return bool(result)
        except Exception as e:
            logger.error(f"Failed to store collection {key}: {e}")
            raise CollectionError(str(e)) from e

    async def find(self, key: str, options: OptionsLike = None) -> List[Record]:
        """
        Return every record satisfying the where clause, in stored order.

        Args:
            key: Store key
            options: FindOptions or {"where": {...}, "operator": "AND"}

        Returns:
            Matching records; [] if the key is absent
        """
        try:
            opts = FindOptions.coerce(options) if options is not None else FindOptions()
            items = await self.get_all(key)
            if not items:
                return []
            test = opts.predicate()
            return [item for item in items if test(item)]
        except CollectionError:
            raise
        except Exception as e:
            raise CollectionError(str(e)) from e

    async def find_one(self, key: str, id_or_options: Any) -> Union[Record, _NotFound]:
        """
        Return the first record matching an identity value or options.

        Args:
            key: Store key
            id_or_options: Value matched against the id field, or find options

        Returns:
            The first matching record, or NOT_FOUND
        """
        try:
            opts = FindOptions.from_id_or_options(id_or_options)
            items = await self.get_all(key)
            if not items:
                return NOT_FOUND
            test = opts.predicate()
            for item in items:
                if test(item):
                    return item
            return NOT_FOUND
        except CollectionError:
            raise
        except Exception as e:
            raise CollectionError(str(e)) from e

    async def save_or_update(
            self,
            key: str,
            record: Record,
            comparator: Mapping[str, Any],
    ) -> bool:
        """
        Replace the record matching comparator, or add a new one.

        The saved record is always stored first. When a record matches
        comparator (AND over its fields), every matching record is dropped
        and the rest keep their order behind the saved one.

        Returns:
            The store client's success flag
        """
        try:
            items = await self.get_all(key) or []
            matches = compose_predicate(comparator, Operator.AND)

            if any(matches(item) for item in items):
                others = [item for item in items if not matches(item)]
                logger.debug(f"Updating record matching {dict(comparator)} in {key}")
                return await self.memoize(key, [record, *others])

            logger.debug(f"Adding record to {key}")
            return await self.memoize(key, [record, *items])
        except CollectionError:
            raise
        except Exception as e:
            raise CollectionError(str(e)) from e

    async def delete(self, key: str, id_or_options: Any) -> bool:
        """
        Remove records from a collection.

        With an identity value, removes the first record whose id equals
        it; an unknown id is a no-op that still returns True. With a where
        clause, keeps only the records for which every field differs from
        the clause (the NOT operator) and stores the result.

        Returns:
            True, or the store client's success flag after a write
        """
        try:
            items = await self.get_all(key)

            if not isinstance(id_or_options, (FindOptions, Mapping)):
                if not items:
                    return True
                matches = compose_predicate({"id": id_or_options}, Operator.AND)
                for index, item in enumerate(items):
                    if matches(item):
                        del items[index]
                        logger.debug(f"Deleted record id={id_or_options!r} from {key}")
                        await self.memoize(key, items)
                        break
                return True

            opts = FindOptions.coerce(id_or_options)
            if items is None:
                return True
            keep = compose_predicate(opts.where, Operator.NOT)
            remaining = [item for item in items if keep(item)]
            logger.debug(f"Deleted {len(items) - len(remaining)} records from {key}")
            return await self.memoize(key, remaining)
        except CollectionError:
            raise
        except Exception as e:
            raise CollectionError(str(e)) from e

    async def find_or_create(
            self,
            key: str,
            options: OptionsLike,
            create_fn: Callable[[], Union[Record, List[Record], Awaitable[Any]]],
            comparator: Optional[Mapping[str, Any]] = None,
    ) -> Union[Record, List[Record]]:
        """
        Return existing matches, or create and store new records.

        Args:
            key: Store key
            options: Find options used to look for existing records
            create_fn: Called with no arguments when nothing matches; returns
                a record or a list of records (may be a coroutine function)
            comparator: Passed to save_or_update for each created record;
                defaults to {"id": options.where["id"]}, or to each created
                record's own id when the where clause has no id

        Returns:
            The found records, or whatever create_fn produced
        """
        try:
            opts = FindOptions.coerce(options)
            found = await self.find(key, opts)
            if found:
                return found

            created = create_fn()
            if inspect.isawaitable(created):
                created = await created

            records = list(created) if isinstance(created, (list, tuple)) else [created]
            for record in records:
                await self.save_or_update(key, record, self._comparator_for(opts, record, comparator))

            logger.debug(f"Created {len(records)} records in {key}")
            return created
        except CollectionError:
            raise
        except Exception as e:
            raise CollectionError(str(e)) from e

    @staticmethod
    def _comparator_for(
            options: FindOptions,
            record: Record,
            comparator: Optional[Mapping[str, Any]],
    ) -> Mapping[str, Any]:
        if comparator is not None:
            return comparator
        if "id" in options.where:
            return {"id": options.where["id"]}
        if "id" in record:
            return {"id": record["id"]}
        # Matches nothing, so the record is always prepended
        return {"id": object()}
