from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from proving_service.config import Settings
from proving_service.security.cors import build_cors_config
from proving_service.services.locks import PathLocks


def test_settings_defaults(monkeypatch):
    for var in (
        "PROVER_BACKEND",
        "CIRCUIT_DEGREE",
        "PROVING_KEY_PATH",
        "VERIFYING_KEY_PATH",
        "TRANSPILE_TRIM_HEAD",
        "TRANSPILE_TRIM_TAIL",
        "PORT",
        "CORS_ALLOW_ORIGINS",
        "CORS_ALLOW_CREDENTIALS",
    ):
        monkeypatch.delenv(var, raising=False)
    cfg = Settings(_env_file=None)
    assert cfg.circuit_degree == 17
    assert (cfg.transpile_trim_head, cfg.transpile_trim_tail) == (16, 7)
    assert cfg.proving_key_path == Path("./proving_key")
    assert cfg.verifying_key_path == Path("./verifying_key")
    assert cfg.port == 8000
    assert cfg.prover_backend is None
    assert cfg.cors_allow_credentials is True
    assert "http://localhost:3000" in cfg.allow_origins


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CIRCUIT_DEGREE", "12")
    monkeypatch.setenv("TRANSPILE_TRIM_HEAD", "3")
    monkeypatch.setenv("PROVER_BACKEND", "halo2_p256.backend:Backend")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", '["https://app.example.com", "https://*.example.org"]')
    cfg = Settings(_env_file=None)
    assert cfg.log_level == "DEBUG"
    assert cfg.circuit_degree == 12
    assert cfg.transpile_trim_head == 3
    assert cfg.prover_backend == "halo2_p256.backend:Backend"
    assert cfg.allow_origins == ["https://app.example.com", "https://*.example.org"]

    cors = cfg.to_cors_config()
    assert cors.allow_origins == ["https://app.example.com"]
    assert cors.allow_origin_regex is not None


def test_csv_lists(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_METHODS", "GET, POST")
    assert Settings(_env_file=None).allow_methods == ["GET", "POST"]


def test_wildcard_origin_with_credentials_is_rejected():
    with pytest.raises(ValueError):
        build_cors_config(
            allow_origins=["*"], allow_methods=["GET"], allow_headers=[], allow_credentials=True
        )
    cors = build_cors_config(
        allow_origins=["*"], allow_methods=["GET"], allow_headers=[], allow_credentials=False
    )
    assert cors.allow_origins == ["*"]


def test_path_locks_share_one_lock_per_path(tmp_path: Path):
    locks = PathLocks()
    with locks.hold(tmp_path / "a.sol", tmp_path / "b.bin"):
        assert len(locks) == 2
        with locks.hold(tmp_path / "c.sol"):
            assert len(locks) == 3
    (tmp_path / "sub").mkdir()
    with locks.hold(tmp_path / "sub" / ".." / "a.sol", tmp_path / "a.sol"):
        assert len(locks) == 1


def test_path_locks_are_dropped_once_released(tmp_path: Path):
    locks = PathLocks()
    for i in range(50):
        with locks.hold(tmp_path / f"out{i}.sol"):
            pass
    assert len(locks) == 0

    started = threading.Event()
    release = threading.Event()

    def holder():
        with locks.hold(tmp_path / "busy.sol"):
            started.set()
            release.wait(timeout=2)

    t = threading.Thread(target=holder)
    t.start()
    assert started.wait(timeout=2)
    assert len(locks) == 1
    release.set()
    t.join()
    assert len(locks) == 0


def test_path_locks_serialize_writers(tmp_path: Path):
    locks = PathLocks()
    target = tmp_path / "Verifier.sol"
    inside = 0
    overlap = []

    def writer():
        nonlocal inside
        with locks.hold(target):
            inside += 1
            overlap.append(inside)
            time.sleep(0.01)
            inside -= 1

    threads = [threading.Thread(target=writer) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert overlap == [1, 1, 1, 1]


def test_path_locks_distinct_paths_do_not_block(tmp_path: Path):
    locks = PathLocks()
    acquired = threading.Event()

    def other():
        with locks.hold(tmp_path / "other.sol"):
            acquired.set()

    with locks.hold(tmp_path / "mine.sol"):
        t = threading.Thread(target=other)
        t.start()
        assert acquired.wait(timeout=2)
    t.join()


def test_wildcard_and_exact_origins():
    import re

    cors = build_cors_config(
        allow_origins=["http://localhost:3000/", "https://*.example.org"],
        allow_methods=["POST"],
        allow_headers=["Content-Type"],
        allow_credentials=True,
    )
    assert cors.allow_origins == ["http://localhost:3000"]
    assert re.match(cors.allow_origin_regex, "https://sdk.example.org")
    assert re.match(cors.allow_origin_regex, "https://a.b.example.org")
    assert not re.match(cors.allow_origin_regex, "https://example.org.evil.com")

    with pytest.raises(ValueError):
        build_cors_config(
            allow_origins=["localhost:3000"], allow_methods=[], allow_headers=[], allow_credentials=False
        )
