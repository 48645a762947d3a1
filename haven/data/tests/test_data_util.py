import pytest

from haven.config import get_config, set_config_for_test
from haven.data.backends.csv_backend import CsvDataAccess
from haven.data.backends.orm import dispose_database, get_database
from haven.data.backends.sql_backend import SqlDataAccess
from haven.data.models import Predicate
from haven.data.util import get_data_access


def test_csv_backend_from_config(seeded_csv_dir):
    set_config_for_test(data_backend="csv", data_dir=str(seeded_csv_dir), log_level="WARNING")
    da = get_data_access()
    assert isinstance(da, CsvDataAccess)
    assert da.count(Predicate()) == 6


def test_sql_backend_shares_process_database(tmp_path):
    set_config_for_test(database_url=f"sqlite:///{tmp_path / 'shared.db'}", log_level="WARNING")
    try:
        da = get_data_access("sql")
        assert isinstance(da, SqlDataAccess)
        assert da.database is get_database()
        assert da.count(Predicate()) == 0
    finally:
        dispose_database()


def test_dispose_database_resets_handle(tmp_path):
    set_config_for_test(database_url=f"sqlite:///{tmp_path / 'once.db'}", log_level="WARNING")
    first = get_database()
    dispose_database()
    second = get_database()
    try:
        assert first is not second
        assert str(second.engine.url) == get_config().database_url
    finally:
        dispose_database()


def test_unknown_kind():
    with pytest.raises(ValueError):
        get_data_access("parquet")
