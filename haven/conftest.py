import pytest

from haven.auth.credentials import hash_password
from haven.backend.seed_data import main as seed_main
from haven.backend.seed_data import seed_sql
from haven.config import set_config_for_test
from haven.data.backends.orm import Database


@pytest.fixture(autouse=True)
def fast_config(tmp_path):
    """Cheap bcrypt rounds and an isolated database for every test."""
    set_config_for_test(
        password_hash_rounds=4,
        default_seed_hash_rounds=4,
        data_dir=str(tmp_path / "csv"),
        database_url=f"sqlite:///{tmp_path / 'config.db'}",
        log_level="WARNING",
    )
    yield


@pytest.fixture
def seeded_csv_dir(tmp_path):
    outdir = tmp_path / "seeded"
    assert seed_main(["--target", "csv", "--output-dir", str(outdir), "--hash-rounds", "4"]) == 0
    return outdir


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'haven.db'}")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def seeded_database(database):
    seed_sql(database, hash_password("password123", rounds=4))
    return database
