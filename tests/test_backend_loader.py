from __future__ import annotations

import pytest

from proving_service.adapters.prover import ProverBackend, load_backend
from proving_service.errors import BackendUnavailable

from .samples import FakeBackend

# Module-level targets for "tests.test_backend_loader:<attr>" specs.
BACKEND_INSTANCE = FakeBackend()


def make_backend() -> FakeBackend:
    return FakeBackend()


class Incomplete:
    def download_keys(self, degree, proving_key_path, verifying_key_path):
        return None


def test_loads_instance():
    backend = load_backend(f"{__name__}:BACKEND_INSTANCE")
    assert backend is BACKEND_INSTANCE
    assert isinstance(backend, ProverBackend)


def test_loads_class_and_factory():
    assert isinstance(load_backend("tests.samples:FakeBackend"), FakeBackend)
    assert isinstance(load_backend(f"{__name__}:make_backend"), FakeBackend)


@pytest.mark.parametrize("target", [None, "", "no_colon", ":attr", "module:"])
def test_missing_or_malformed_target(target):
    with pytest.raises(BackendUnavailable) as info:
        load_backend(target)
    assert info.value.status_code == 503
    assert info.value.code == "backend_unavailable"


def test_unimportable_module():
    with pytest.raises(BackendUnavailable) as info:
        load_backend("definitely_not_a_real_module_xyz:Backend")
    assert info.value.details == {"backend": "definitely_not_a_real_module_xyz:Backend"}


def test_missing_attribute():
    target = f"{__name__}:NoSuchBackend"
    with pytest.raises(BackendUnavailable) as info:
        load_backend(target)
    assert info.value.details == {"backend": target}


def test_incomplete_backend_lists_missing_methods():
    with pytest.raises(BackendUnavailable) as info:
        load_backend(f"{__name__}:Incomplete")
    assert info.value.details["backend"] == f"{__name__}:Incomplete"
    assert info.value.details["missing"] == [
        "generate_proof",
        "verify_proof",
        "generate_verifier_assembly",
    ]


@pytest.mark.asyncio
async def test_incomplete_backend_problem_names_target(settings):
    from httpx import ASGITransport, AsyncClient

    from proving_service.app import create_app

    target = f"{__name__}:Incomplete"
    app = create_app(settings.model_copy(update={"prover_backend": target}))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        resp = await client.get("/setup")
    assert resp.status_code == 503
    assert resp.json()["details"]["backend"] == target
