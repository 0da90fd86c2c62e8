import pytest

from orgapi.core import validators
from orgapi.core.models import DeleteOrg, DeleteUser, Org, User


def test_validate_email_trims_and_keeps_case():
    assert validators.validate_email("  Alice@Example.COM ") == "Alice@Example.COM"


@pytest.mark.parametrize("email", ["", "alice", "@example.com", "alice@", "alice@localhost"])
def test_validate_email_rejects_malformed(email):
    with pytest.raises(ValueError):
        validators.validate_email(email)


def test_validate_email_rejects_too_long():
    with pytest.raises(ValueError, match="maximum length"):
        validators.validate_email("a" * 250 + "@example.com")


def test_validate_name_trims():
    assert validators.validate_name("  Acme  ", "Org name") == "Acme"


@pytest.mark.parametrize("name", ["", "   ", "x" * 129])
def test_validate_name_rejects(name):
    with pytest.raises(ValueError):
        validators.validate_name(name, "Org name")


def test_validate_org_requires_name_and_desc():
    with pytest.raises(ValueError, match="Org name is required"):
        validators.validate_org(Org(name="", desc="d"))
    with pytest.raises(ValueError, match="Description is required"):
        validators.validate_org(Org(name="acme", desc=" "))


def test_validate_org_requires_version_for_updates():
    with pytest.raises(ValueError, match="Version"):
        validators.validate_org(Org(id="o1", name="acme", desc="d"))


def test_validate_name_accepts_punctuation():
    assert validators.validate_name("Smith & Sons; O'Brien", "Org name") == "Smith & Sons; O'Brien"


def test_validate_org_leaves_values_untouched():
    org = Org(name=" acme ", desc=" Acme Corp ")

    validators.validate_org(org)

    assert (org.name, org.desc) == (" acme ", " Acme Corp ")


def test_validate_user_leaves_values_untouched():
    user = User(org_id=" o1 ", name=" Alice ", email=" ALICE@example.com ")

    validators.validate_user(user)

    assert (user.org_id, user.name, user.email) == (" o1 ", " Alice ", " ALICE@example.com ")


def test_validate_user_requires_org():
    with pytest.raises(ValueError, match="Org id"):
        validators.validate_user(User(org_id="", name="Alice", email="alice@example.com"))


@pytest.mark.parametrize("target", [DeleteOrg(id="", version=1), DeleteUser(id="u1", version=0)])
def test_validate_delete_requires_id_and_version(target):
    with pytest.raises(ValueError):
        validators.validate_delete(target)
