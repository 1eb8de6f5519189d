"""Tests for EnumTranslator lookups."""

import threading

from metasys_py.localization.resources import MappingResourceProvider
from metasys_py.localization.translator import EnumTranslator
from tests.helpers import DE, EN, make_translator


class CountingProvider(MappingResourceProvider):
    def __init__(self, tables):
        super().__init__(tables)
        self.walks = 0

    def iter_resources(self, locale):
        self.walks += 1
        yield from super().iter_resources(locale)


class TestLocalize:
    def test_requested_locale(self):
        t = make_translator()
        assert t.localize("reliabilityEnumSet.reliable", "de-DE") == "Zuverlässig"

    def test_falls_back_to_default_locale(self):
        t = make_translator()
        assert "reliabilityEnumSet.overRange" not in DE
        assert t.localize("reliabilityEnumSet.overRange", "de-DE") == "Over Range"

    def test_unknown_locale_falls_back(self):
        t = make_translator()
        assert t.localize("reliabilityEnumSet.reliable", "ja-JP") == "Reliable"

    def test_unknown_key_returned_unchanged(self):
        t = make_translator()
        assert t.localize("fooEnumSet.bar", "de-DE") == "fooEnumSet.bar"

    def test_none_locale_uses_default(self):
        t = make_translator()
        assert t.localize("reliabilityEnumSet.reliable") == EN["reliabilityEnumSet.reliable"]

    def test_other_default_locale(self):
        t = EnumTranslator(MappingResourceProvider({"en-US": EN, "de-DE": DE}), "de_de")
        assert t.default_locale == "de-DE"
        assert t.localize("reliabilityEnumSet.reliable", "fr-FR") == "Zuverlässig"

    def test_blank_locale_uses_default(self):
        t = make_translator()
        for locale in ("", "   "):
            assert t.localize("reliabilityEnumSet.reliable", locale) == "Reliable"

    def test_unusable_locale_skipped(self):
        class RejectingProvider(MappingResourceProvider):
            def get_string(self, key, locale):
                if locale != "en-US":
                    msg = f"bad locale {locale!r}"
                    raise ValueError(msg)
                return super().get_string(key, locale)

        t = EnumTranslator(RejectingProvider({"en-US": EN}))
        assert t.localize("reliabilityEnumSet.reliable", "../x") == "Reliable"
        assert t.localize("fooEnumSet.bar", "../x") == "fooEnumSet.bar"


class TestReverseLookup:
    def test_command(self):
        t = make_translator()
        assert t.reverse_lookup_command("Adjust") == "commandIdEnumSet.adjustCommand"

    def test_command_unknown_passthrough(self):
        t = make_translator()
        assert t.reverse_lookup_command("Frobnicate") == "Frobnicate"

    def test_command_does_not_match_object_types(self):
        t = make_translator()
        assert t.reverse_lookup_command("Analog Value") == "Analog Value"

    def test_object_type(self):
        t = make_translator()
        assert t.reverse_lookup_object_type("Analog Value") == "objectTypeEnumSet.avClass"

    def test_object_type_collision_first_wins(self):
        t = make_translator()
        assert t.reverse_lookup_object_type("Device") == "objectTypeEnumSet.deviceClass"

    def test_overflow_consulted(self):
        t = make_translator()
        tables = t._reverse_tables()
        assert tables.object_types_overflow["Device"] == "objectTypeEnumSet.bacnetDeviceClass"

    def test_object_type_unknown_passthrough(self):
        t = make_translator()
        assert t.reverse_lookup_object_type("Toaster") == "Toaster"

    def test_uses_default_locale_only(self):
        t = make_translator()
        assert t.reverse_lookup_command("Anpassen") == "Anpassen"

    def test_tables_built_once(self):
        provider = CountingProvider({"en-US": EN})
        t = EnumTranslator(provider)
        t.reverse_lookup_command("Adjust")
        t.reverse_lookup_object_type("NAE")
        t.reverse_lookup_command("Release")
        assert provider.walks == 1

    def test_concurrent_first_use_builds_once(self):
        provider = CountingProvider({"en-US": EN})
        t = EnumTranslator(provider)
        results = []

        def worker():
            results.append(t.reverse_lookup_object_type("NAE"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert results == ["objectTypeEnumSet.naeClass"] * 8
        assert provider.walks == 1

    def test_instances_are_independent(self):
        a = EnumTranslator(MappingResourceProvider({"en-US": {"commandIdEnumSet.x": "Go"}}))
        b = EnumTranslator(MappingResourceProvider({"en-US": {"commandIdEnumSet.y": "Go"}}))
        assert a.reverse_lookup_command("Go") == "commandIdEnumSet.x"
        assert b.reverse_lookup_command("Go") == "commandIdEnumSet.y"
