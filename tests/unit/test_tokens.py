from unittest.mock import Mock

import jwt
import pytest
import requests

from orgapi.config.settings import ClientConfig
from orgapi.core import tokens
from orgapi.core.httpclient.exceptions import TokenSupplierError
from orgapi.core.tokens import (
    ClientCredentialsTokenSupplier,
    HmacJWTTokenSupplier,
    StaticTokenSupplier,
    build_token_supplier,
)

SECRET = "unit-test-hmac-secret-with-32-plus-bytes"


def count_fetches(monkeypatch, supplier):
    fetched = []
    original = supplier._fetch

    def counting():
        result = original()
        fetched.append(result)
        return result

    monkeypatch.setattr(supplier, "_fetch", counting)
    return fetched


def test_static_supplier_returns_same_token_on_retry():
    supplier = StaticTokenSupplier("pre-issued")

    assert supplier(False) == "pre-issued"
    assert supplier(True) == "pre-issued"


def test_hmac_supplier_mints_verifiable_admin_token():
    supplier = HmacJWTTokenSupplier(SECRET, "user-1", "org-service", "issuer-1", admin=True)

    claims = jwt.decode(
        supplier(False), SECRET, algorithms=["HS256"], audience="org-service", issuer="issuer-1"
    )

    assert claims["sub"] == "user-1"
    assert claims["admin"] is True
    assert claims["exp"] - claims["iat"] == 86400


def test_hmac_supplier_omits_admin_claim_for_regular_users():
    supplier = HmacJWTTokenSupplier(SECRET, "user-2", "aud", "iss")

    claims = jwt.decode(supplier(False), SECRET, algorithms=["HS256"], audience="aud")

    assert "admin" not in claims


def test_hmac_supplier_caches_until_retry(monkeypatch):
    supplier = HmacJWTTokenSupplier(SECRET, "user-1", "aud", "iss")
    fetched = count_fetches(monkeypatch, supplier)

    first = supplier(False)
    second = supplier(False)
    supplier(True)

    assert first == second
    assert len(fetched) == 2


def test_hmac_supplier_refreshes_tokens_near_expiry(monkeypatch):
    supplier = HmacJWTTokenSupplier(SECRET, "user-1", "aud", "iss", ttl_seconds=tokens.EXPIRY_MARGIN_SECONDS)
    fetched = count_fetches(monkeypatch, supplier)

    supplier(False)
    supplier(False)

    assert len(fetched) == 2


def _token_response(payload, status_code=200):
    return Mock(status_code=status_code, json=Mock(return_value=payload), text=str(payload))


def test_client_credentials_posts_grant_and_caches(monkeypatch):
    calls = []

    def fake_post(url, data=None, timeout=None, **kwargs):
        calls.append((url, data, timeout))
        return _token_response({"access_token": f"token-{len(calls)}", "expires_in": 300})

    monkeypatch.setattr(requests, "post", fake_post)
    supplier = ClientCredentialsTokenSupplier("http://idp/token", "cli", "s3cret")

    assert supplier(False) == "token-1"
    assert supplier(False) == "token-1"
    assert supplier(True) == "token-2"
    url, data, timeout = calls[0]
    assert url == "http://idp/token"
    assert data == {"grant_type": "client_credentials", "client_id": "cli", "client_secret": "s3cret"}
    assert timeout == tokens.REQUEST_TIMEOUT


@pytest.mark.parametrize(
    "response",
    [
        _token_response({"error": "invalid_client"}, status_code=401),
        _token_response({"token_type": "bearer"}),
        Mock(status_code=200, json=Mock(side_effect=ValueError("not json")), text="<html>"),
    ],
)
def test_client_credentials_failures_raise_supplier_error(monkeypatch, response):
    monkeypatch.setattr(requests, "post", lambda *args, **kwargs: response)
    supplier = ClientCredentialsTokenSupplier("http://idp/token", "cli", "s3cret")

    with pytest.raises(TokenSupplierError):
        supplier(False)


def test_client_credentials_network_failure_raises_supplier_error(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(requests, "post", fake_post)
    supplier = ClientCredentialsTokenSupplier("http://idp/token", "cli", "s3cret")

    with pytest.raises(TokenSupplierError) as exc_info:
        supplier(True)

    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


def make_config(**overrides):
    base = dict(
        demo_mode=False,
        base_url="http://localhost:4000",
        api_token="",
        jwt_secret="",
        jwt_subject="",
        token_url="",
        client_id="",
        client_secret="",
    )
    base.update(overrides)
    return ClientConfig(**base)


def test_build_token_supplier_prefers_static_token():
    cfg = make_config(api_token="pre", jwt_secret=SECRET, jwt_subject="u", token_url="http://idp",
                      client_id="c", client_secret="s")

    assert isinstance(build_token_supplier(cfg), StaticTokenSupplier)


def test_build_token_supplier_uses_client_credentials_over_jwt():
    cfg = make_config(jwt_secret=SECRET, jwt_subject="u", token_url="http://idp", client_id="c",
                      client_secret="s")

    assert isinstance(build_token_supplier(cfg), ClientCredentialsTokenSupplier)


def test_build_token_supplier_passes_configured_timeout(monkeypatch):
    calls = []

    def fake_post(url, data=None, timeout=None, **kwargs):
        calls.append(timeout)
        return _token_response({"access_token": "tok", "expires_in": 300})

    monkeypatch.setattr(requests, "post", fake_post)
    cfg = make_config(token_url="http://idp/token", client_id="c", client_secret="s", request_timeout=1.5)

    assert build_token_supplier(cfg)(False) == "tok"
    assert calls == [1.5]


def test_build_token_supplier_falls_back_to_jwt():
    cfg = make_config(jwt_secret=SECRET, jwt_subject="u", jwt_admin=True)

    supplier = build_token_supplier(cfg)

    assert isinstance(supplier, HmacJWTTokenSupplier)
    assert supplier.admin is True
    assert supplier.audience == "org-service"


def test_build_token_supplier_requires_credentials():
    with pytest.raises(ValueError):
        build_token_supplier(make_config())
