import dataclasses
from datetime import timedelta
from typing import Optional

import pytest
from flagstruct import InvalidTargetError, MissingRequiredFlagError, decode


@dataclasses.dataclass
class Database:
    host: str = dataclasses.field(
        default="", metadata={"flag": "db-host,default=127.0.0.1"}
    )
    port: int = dataclasses.field(default=0, metadata={"flag": "db-port,default=5672"})
    user: str = dataclasses.field(default="", metadata={"flag": "db-user,required"})
    timeout: timedelta = dataclasses.field(
        default=timedelta(0), metadata={"flag": "db-timeout,default=5s"}
    )


@dataclasses.dataclass
class Cache:
    size: int = dataclasses.field(default=0, metadata={"flag": "cache-size"})


@dataclasses.dataclass
class Service:
    name: str = dataclasses.field(default="", metadata={"flag": "name"})
    database: Database = dataclasses.field(default_factory=Database)
    cache: Optional[Cache] = None


@dataclasses.dataclass(frozen=True)
class Frozen:
    value: int = dataclasses.field(default=0, metadata={"flag": "value"})


@dataclasses.dataclass
class WithFrozen:
    frozen: Frozen = dataclasses.field(default_factory=Frozen)


def test_nested_dataclass_is_resolved_with_same_arguments():
    service = decode(Service(), ["-name=api", "-db-user=root"])
    assert service.name == "api"
    assert service.database.host == "127.0.0.1"
    assert service.database.port == 5672
    assert service.database.user == "root"
    assert service.database.timeout == timedelta(seconds=5)


def test_nested_required_flag_aborts_decoding():
    with pytest.raises(MissingRequiredFlagError) as exc:
        decode(Service(), ["-name=api"])
    assert exc.value.flag_name == "db-user"


def test_none_nested_dataclass_is_not_allocated():
    service = decode(Service(), ["-db-user=root", "-cache-size=10"])
    assert service.cache is None


def test_existing_optional_nested_dataclass_is_descended_into():
    service = decode(Service(cache=Cache()), ["-db-user=root", "-cache-size=10"])
    assert service.cache == Cache(size=10)


def test_nested_instance_is_updated_in_place():
    database = Database()
    service = Service(database=database)
    decode(service, ["-db-user=root"])
    assert service.database is database
    assert database.user == "root"


def test_frozen_nested_dataclass_is_rejected():
    with pytest.raises(InvalidTargetError):
        decode(WithFrozen(), [])


@dataclasses.dataclass
class Deep:
    service: Service = dataclasses.field(default_factory=Service)
    level: int = dataclasses.field(default=0, metadata={"flag": "level,default=3"})


def test_deeply_nested_dataclasses():
    deep = decode(Deep(), ["--db-user=admin", "--db-port=6000"])
    assert deep.level == 3
    assert deep.service.database.user == "admin"
    assert deep.service.database.port == 6000
