"""Tests for core.config — settings resolution."""

from __future__ import annotations

import json

from core.config import AppSettings, _parse_env_lines, write_user_env_vars


def _vcap(name: str = "nps-cloudant", label: str = "cloudantNoSQLDB", url: str = "https://u:p@acct.cloudant.com") -> str:
    return json.dumps({label: [{"name": name, "credentials": {"url": url}}]})


class TestStoreUrl:
    def test_explicit_url_wins(self):
        settings = AppSettings(_env_file=None, couchdb_url="http://local:5984", vcap_services=_vcap())
        assert settings.resolve_store_url() == "http://local:5984"

    def test_bound_service_by_instance_name(self):
        settings = AppSettings(_env_file=None, vcap_services=_vcap())
        assert settings.resolve_store_url() == "https://u:p@acct.cloudant.com"

    def test_bound_service_by_label(self):
        settings = AppSettings(_env_file=None, vcap_services=_vcap(name="other", label="nps-cloudant"))
        assert settings.resolve_store_url() == "https://u:p@acct.cloudant.com"

    def test_unrelated_service(self):
        settings = AppSettings(_env_file=None, vcap_services=_vcap(name="other"))
        assert settings.resolve_store_url() is None

    def test_malformed_vcap(self):
        settings = AppSettings(_env_file=None, vcap_services="{not json")
        assert settings.resolve_store_url() is None


class TestEnvironment:
    def test_unprefixed_slack_variables(self, monkeypatch):
        monkeypatch.setenv("SLACK_TOKEN", "from-env")
        monkeypatch.setenv("SLACK_URL", "https://team.slack.com")
        settings = AppSettings(_env_file=None)
        assert settings.slack_token == "from-env"
        assert settings.slack_url == "https://team.slack.com"

    def test_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("NPS_META_DATABASE", "custom-meta")
        monkeypatch.setenv("NPS_LOG_FORMAT", "json")
        settings = AppSettings(_env_file=None)
        assert settings.meta_database == "custom-meta"
        assert settings.log_format == "json"
        assert settings.data_database == "nps-data"

    def test_missing_settings_in_order(self, monkeypatch):
        for name in ("SLACK_TOKEN", "SLACK_URL", "NPS_SLACK_TOKEN", "NPS_SLACK_URL", "NPS_COUCHDB_URL", "VCAP_SERVICES"):
            monkeypatch.delenv(name, raising=False)
        missing = AppSettings(_env_file=None).missing_bootstrap_settings()
        assert missing[:2] == ["SLACK_TOKEN", "SLACK_URL"]
        assert missing[2].startswith("store URL")


class TestUserEnvFile:
    def test_write_merges_existing_values(self, tmp_path):
        env_path = tmp_path / "nps" / ".env"
        write_user_env_vars({"NPS_SLACK_URL": "https://a.slack.com"}, env_path=env_path)
        write_user_env_vars({"NPS_COUCHDB_URL": "http://couch:5984"}, env_path=env_path)

        values = _parse_env_lines(env_path.read_text(encoding="utf-8"))
        assert values == {"NPS_SLACK_URL": "https://a.slack.com", "NPS_COUCHDB_URL": "http://couch:5984"}

    def test_parse_skips_comments_and_quotes(self):
        text = "# comment\nA='1'\n\nB=\"two\"\nbroken line\n"
        assert _parse_env_lines(text) == {"A": "1", "B": "two"}
