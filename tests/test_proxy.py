from types import SimpleNamespace

import pytest

from kindcluster.providers.common.proxy import get_proxy_envs


def _cluster():
    return SimpleNamespace(
        networking=SimpleNamespace(service_subnet="10.0.0.0/24", pod_subnet="12.0.0.0/24")
    )


def _getter(env):
    return lambda name: env.get(name, "")


def test_default_environment_lookup(monkeypatch):
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "NO_PROXY", "http_proxy", "https_proxy", "no_proxy"):
        monkeypatch.delenv(name, raising=False)
    assert get_proxy_envs(_cluster()) == {}
    monkeypatch.setenv("HTTP_PROXY", "5.5.5.5")
    assert get_proxy_envs(_cluster())["http_proxy"] == "5.5.5.5"


@pytest.mark.parametrize(
    "env, expected",
    [
        ({}, {}),
        (
            {"HTTP_PROXY": "5.5.5.5"},
            {
                "HTTP_PROXY": "5.5.5.5",
                "http_proxy": "5.5.5.5",
                "NO_PROXY": "10.0.0.0/24,12.0.0.0/24",
                "no_proxy": "10.0.0.0/24,12.0.0.0/24",
            },
        ),
        (
            {"HTTPS_PROXY": "5.5.5.5"},
            {
                "HTTPS_PROXY": "5.5.5.5",
                "https_proxy": "5.5.5.5",
                "NO_PROXY": "10.0.0.0/24,12.0.0.0/24",
                "no_proxy": "10.0.0.0/24,12.0.0.0/24",
            },
        ),
        (
            {"HTTPS_PROXY": "5.5.5.5", "NO_PROXY": "8.8.8.8"},
            {
                "HTTPS_PROXY": "5.5.5.5",
                "https_proxy": "5.5.5.5",
                "NO_PROXY": "8.8.8.8,10.0.0.0/24,12.0.0.0/24",
                "no_proxy": "8.8.8.8,10.0.0.0/24,12.0.0.0/24",
            },
        ),
    ],
)
def test_get_proxy_envs(env, expected):
    assert get_proxy_envs(_cluster(), _getter(env)) == expected


def test_lower_case_variable_is_used_as_fallback():
    result = get_proxy_envs(_cluster(), _getter({"http_proxy": "5.5.5.5"}))
    assert result["HTTP_PROXY"] == "5.5.5.5"
    assert result["http_proxy"] == "5.5.5.5"
    assert result["NO_PROXY"] == "10.0.0.0/24,12.0.0.0/24"