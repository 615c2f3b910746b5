import json

from spiffe_bundle_explorer.bundle.loader import load_bundle
from spiffe_bundle_explorer.store import BundleStore


def test_store_starts_empty():
    store = BundleStore()
    assert store.current() is None
    assert store.find_certificate("1a2b3c") is None


def test_replace_and_clear(now):
    store = BundleStore()
    first = load_bundle('{"keys": [{"use": "jwt-svid", "kid": "a"}]}', now)
    second = load_bundle('{"keys": []}', now)

    store.replace(first)
    assert store.current() is first
    store.replace(second)
    assert store.current() is second

    store.clear()
    assert store.current() is None


def test_find_certificate_by_plain_or_display_serial(make_x5c, now):
    store = BundleStore()
    text = json.dumps(
        {
            "keys": [
                {"use": "x509-svid", "x5c": [make_x5c(serial_number=0x0ABC)]},
                {"use": "x509-svid", "x5c": [make_x5c()]},
            ]
        }
    )
    store.replace(load_bundle(text, now))

    assert store.find_certificate("1a2b3c").serial_number == "1a2b3c"
    assert store.find_certificate("1A:2B:3C").serial_number == "1a2b3c"
    assert store.find_certificate("0a:bc").serial_number == "0abc"
    assert store.find_certificate("ffff") is None
