import abc
import json
import os
from configparser import ConfigParser
from typing import Optional, Tuple

from scorebook.error import StoreError
from scorebook.match import MatchConfig, MatchInnings
from scorebook.replay import check_consistency
from scorebook.util import LOGGER

MATCH_CONFIG_KEY = "cricket_match_config"
INNINGS_STATE_KEY = "cricket_match_state"


class KeyValueStore(abc.ABC):
    """Somewhere to keep JSON-compatible match records between sessions."""

    @abc.abstractmethod
    def load(self, key: str) -> Optional[dict]:
        """return the record stored under key, or None if there is none"""
        pass

    @abc.abstractmethod
    def save(self, key: str, value: dict):
        pass

    @abc.abstractmethod
    def clear(self, key: str):
        pass


class MemoryStore(KeyValueStore):
    def __init__(self, config: Optional[dict] = None):
        self._records = {}

    def load(self, key: str) -> Optional[dict]:
        serialized = self._records.get(key)
        if serialized is None:
            return None
        return json.loads(serialized)

    def save(self, key: str, value: dict):
        # stored serialized so later changes to value cannot leak in
        try:
            self._records[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            msg = f"failed to serialize {key}: {e}"
            LOGGER.error(msg)
            raise StoreError(msg)

    def clear(self, key: str):
        self._records.pop(key, None)


class FileStore(KeyValueStore):
    """One JSON file per key inside a directory."""

    def __init__(self, config: dict):
        self.root_dir = os.path.expanduser(config["path"])

    def path_for(self, key: str) -> str:
        return os.path.join(self.root_dir, f"{key}.json")

    def load(self, key: str) -> Optional[dict]:
        url = self.path_for(key)
        if not os.path.exists(url):
            return None
        try:
            with open(url, "r") as fh:
                return json.load(fh)
        except (IOError, ValueError) as e:
            msg = f"failed to load {key} from {url}: {e}"
            LOGGER.error(msg)
            raise StoreError(msg)

    def save(self, key: str, value: dict):
        url = self.path_for(key)
        try:
            # a value that fails to serialize leaves the existing file untouched
            serialized = json.dumps(value, indent=2)
            os.makedirs(self.root_dir, exist_ok=True)
            with open(url, "w") as fh:
                fh.write(serialized)
        except (IOError, TypeError, ValueError) as e:
            msg = f"failed to save {key} to {url}: {e}"
            LOGGER.error(msg)
            raise StoreError(msg)

    def clear(self, key: str):
        url = self.path_for(key)
        try:
            if os.path.exists(url):
                os.remove(url)
        except IOError as e:
            msg = f"failed to clear {key} at {url}: {e}"
            LOGGER.error(msg)
            raise StoreError(msg)


def create_store(config: ConfigParser) -> KeyValueStore:
    if not config.has_section("STORE"):
        return MemoryStore()
    store_config = config["STORE"]
    loader = store_config.get("loader", "memory")
    try:
        store_klass = {"memory": MemoryStore, "file": FileStore}[loader]
    except KeyError:
        msg = f"unknown store loader {loader}"
        LOGGER.error(msg)
        raise StoreError(msg)
    return store_klass(store_config)


class MatchRepository:
    """Typed access to the two match records kept in a store."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load_config(self) -> Optional[MatchConfig]:
        payload = self.store.load(MATCH_CONFIG_KEY)
        if payload is None:
            return None
        return MatchConfig.from_dict(payload)

    def save_config(self, config: MatchConfig):
        self.store.save(MATCH_CONFIG_KEY, config.to_dict())

    def clear_config(self):
        self.store.clear(MATCH_CONFIG_KEY)

    def load_innings(self) -> Optional[MatchInnings]:
        payload = self.store.load(INNINGS_STATE_KEY)
        if payload is None:
            return None
        match_innings = MatchInnings.from_dict(payload)
        for snapshot in match_innings.innings:
            check_consistency(snapshot)
        return match_innings

    def save_innings(self, match_innings: MatchInnings):
        self.store.save(INNINGS_STATE_KEY, match_innings.to_dict())

    def clear_innings(self):
        self.store.clear(INNINGS_STATE_KEY)

    def load(self) -> Tuple[Optional[MatchConfig], Optional[MatchInnings]]:
        return self.load_config(), self.load_innings()

    def clear(self):
        self.clear_config()
        self.clear_innings()
