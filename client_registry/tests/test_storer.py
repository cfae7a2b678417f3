from __future__ import annotations

import pytest

from client_registry.core.errors import (
    ClientAlreadyExists,
    ClientNotFound,
    IncorrectSecret,
    RedirectURIAlreadyExists,
)
from client_registry.core.models import Change, apply, change_secret

CHANGE_SECRET = 1 << 0
CHANGE_NAME = 1 << 1
CHANGE_VARIATIONS = 1 << 2


def _change_for(variation: int) -> Change:
    fields = {}
    if variation & CHANGE_SECRET:
        fields.update(change_secret("changed secret").updates())
    if variation & CHANGE_NAME:
        fields["name"] = f"Updated Test Client {variation}"
    return Change(**fields)


def test_create_get_delete(storer, make_client):
    client = make_client()
    storer.create(client)

    assert storer.get(client.id) == client

    storer.delete(client.id)
    with pytest.raises(ClientNotFound):
        storer.get(client.id)


def test_create_duplicate_keeps_original(storer, make_client):
    client = make_client()
    storer.create(client)

    with pytest.raises(ClientAlreadyExists):
        storer.create(client.model_copy(update={"name": "Impostor"}))

    assert storer.get(client.id) == client


def test_get_unknown_client(storer):
    with pytest.raises(ClientNotFound):
        storer.get("does-not-exist")


@pytest.mark.parametrize("variation", range(1, CHANGE_VARIATIONS))
def test_update_one_of_many(storer, make_client, variation):
    client = make_client()
    storer.create(client)
    throwaways = [
        make_client(secret=f"test secret {idx}", confidential=idx % 2 == 0)
        for idx in range(5)
    ]
    for throwaway in throwaways:
        storer.create(throwaway)

    change = _change_for(variation)
    storer.update(client.id, change)

    assert storer.get(client.id) == apply(change, client)
    for throwaway in throwaways:
        assert storer.get(throwaway.id) == throwaway


def test_update_with_empty_change_is_noop(storer, make_client):
    client = make_client()
    storer.create(client)

    storer.update(client.id, Change())

    assert storer.get(client.id) == client


def test_update_can_clear_a_field(storer, make_client):
    client = make_client()
    storer.create(client)

    storer.update(client.id, Change(name=""))

    assert storer.get(client.id).name == ""
    assert storer.get(client.id).secret_hash == client.secret_hash


def test_update_unknown_client_is_noop(storer):
    storer.update("does-not-exist", Change(name="ghost"))

    with pytest.raises(ClientNotFound):
        storer.get("does-not-exist")


def test_delete_unknown_client_is_noop(storer):
    storer.delete("does-not-exist")


def test_updated_secret_is_checked(storer, make_client):
    client = make_client(secret="old secret")
    storer.create(client)

    storer.update(client.id, change_secret("new secret"))
    stored = storer.get(client.id)

    stored.check_secret("new secret")
    with pytest.raises(IncorrectSecret):
        stored.check_secret("old secret")


def test_list_redirect_uris_unknown_client_is_empty(storer):
    assert storer.list_redirect_uris("does-not-exist") == []


def test_add_and_list_redirect_uris(storer, make_client, make_redirect_uri):
    client = make_client()
    other = make_client()
    uris = [
        make_redirect_uri(client.id, "https://c.example.com/cb"),
        make_redirect_uri(client.id, "https://a.example.com/cb", is_base_uri=True),
        make_redirect_uri(client.id, "https://b.example.com/cb"),
    ]
    others = [make_redirect_uri(other.id, "https://0.example.com/cb")]

    storer.add_redirect_uris(uris + others)

    listed = storer.list_redirect_uris(client.id)
    assert listed == sorted(uris, key=lambda u: u.uri)
    assert storer.list_redirect_uris(other.id) == others


def test_add_redirect_uris_does_not_require_client(storer, make_redirect_uri):
    uri = make_redirect_uri("no-such-client")

    storer.add_redirect_uris([uri])

    assert storer.list_redirect_uris("no-such-client") == [uri]


def test_add_redirect_uris_id_conflict_is_atomic(storer, make_client, make_redirect_uri):
    client = make_client()
    existing = make_redirect_uri(client.id)
    storer.add_redirect_uris([existing])

    fresh = make_redirect_uri(client.id)
    clash = make_redirect_uri(client.id, id=existing.id, uri="https://unique.example.com/cb")

    with pytest.raises(RedirectURIAlreadyExists) as excinfo:
        storer.add_redirect_uris([fresh, clash])

    assert excinfo.value.id == existing.id
    assert excinfo.value.uri is None
    assert storer.list_redirect_uris(client.id) == [existing]


def test_add_redirect_uris_uri_conflict_is_atomic(storer, make_client, make_redirect_uri):
    client = make_client()
    other = make_client()
    existing = make_redirect_uri(client.id, "https://taken.example.com/cb")
    storer.add_redirect_uris([existing])

    fresh = make_redirect_uri(other.id, "https://free.example.com/cb")
    clash = make_redirect_uri(other.id, existing.uri)

    with pytest.raises(RedirectURIAlreadyExists) as excinfo:
        storer.add_redirect_uris([fresh, clash])

    assert excinfo.value.uri == existing.uri
    assert excinfo.value.id is None
    assert storer.list_redirect_uris(other.id) == []
    assert storer.list_redirect_uris(client.id) == [existing]


def test_add_redirect_uris_conflict_within_batch(storer, make_client, make_redirect_uri):
    client = make_client()
    first = make_redirect_uri(client.id, "https://dup.example.com/cb")
    second = make_redirect_uri(client.id, "https://dup.example.com/cb")

    with pytest.raises(RedirectURIAlreadyExists) as excinfo:
        storer.add_redirect_uris([first, second])

    assert excinfo.value.uri == "https://dup.example.com/cb"
    assert storer.list_redirect_uris(client.id) == []


def test_add_redirect_uris_empty_batch(storer):
    storer.add_redirect_uris([])


def test_remove_redirect_uris_ignores_unknown_ids(storer, make_client, make_redirect_uri):
    client = make_client()
    keep = make_redirect_uri(client.id, "https://keep.example.com/cb")
    drop = make_redirect_uri(client.id, "https://drop.example.com/cb")
    storer.add_redirect_uris([keep, drop])

    storer.remove_redirect_uris([drop.id, "never-existed"])

    assert storer.list_redirect_uris(client.id) == [keep]


def test_removed_uri_can_be_added_again(storer, make_client, make_redirect_uri):
    client = make_client()
    uri = make_redirect_uri(client.id)
    storer.add_redirect_uris([uri])
    storer.remove_redirect_uris([uri.id])

    storer.add_redirect_uris([uri])

    assert storer.list_redirect_uris(client.id) == [uri]


def test_client_lifecycle_scenario(storer, make_client, make_redirect_uri):
    c1 = make_client(secret="s3cret", confidential=True)
    storer.create(c1)
    storer.get(c1.id).check_secret("s3cret")

    u1 = make_redirect_uri(c1.id, "https://a/cb")
    u2 = make_redirect_uri(c1.id, "https://b/cb")
    storer.add_redirect_uris([u2, u1])
    assert storer.list_redirect_uris(c1.id) == [u1, u2]

    storer.remove_redirect_uris([u1.id])
    assert storer.list_redirect_uris(c1.id) == [u2]

    storer.delete(c1.id)
    with pytest.raises(ClientNotFound):
        storer.get(c1.id)
