# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Tests for transaction classification and its cascade."""

from __future__ import annotations

import pytest
from builders import key_values

from spanfold.otlp.classification import (
    CATEGORY_RULES,
    ClassificationLabels,
    classify,
    normalize_classification,
)


class TestClassificationLabels:
    """Tests for ClassificationLabels."""

    def test_defaults(self):
        labels = ClassificationLabels()
        assert labels == ClassificationLabels("non-web", "unknown", "unknown")
        assert labels.is_web is False
        assert labels.has_category is False

    def test_to_attributes(self):
        labels = ClassificationLabels("web", "HTTP", "GET")
        assert labels.to_attributes() == {
            "transaction.type": "web",
            "transaction.category": "HTTP",
            "transaction.sub_category": "GET",
        }

    def test_frozen(self):
        labels = ClassificationLabels()
        with pytest.raises(AttributeError):
            labels.type = "web"  # type: ignore[misc]


class TestClassify:
    """Tests for classify."""

    def test_no_attributes(self):
        assert classify() == ClassificationLabels()
        assert classify([], None) == ClassificationLabels()

    def test_programming_language(self):
        labels = classify(key_values({"telemetry.sdk.language": "go"}))
        assert labels == ClassificationLabels("non-web", "Programming Language", "go")

    def test_exception_beats_language_across_lists(self):
        labels = classify(
            key_values({"exception.type": "OutOfBounds"}),
            key_values({"telemetry.sdk.language": "java"}),
        )
        assert labels == ClassificationLabels("non-web", "Exceptions", "OutOfBounds")

    def test_rpc(self):
        labels = classify(key_values({"rpc.system": "GRPC"}))
        assert labels == ClassificationLabels("web", "RPC Systems", "GRPC")

    def test_messaging(self):
        labels = classify(key_values({"messaging.system": "kafka"}))
        assert labels == ClassificationLabels("non-web", "Messaging queues", "kafka")

    def test_http(self):
        labels = classify(key_values({"http.request.method": "GET"}))
        assert labels == ClassificationLabels("web", "HTTP", "GET")

    def test_database_and_language(self):
        labels = classify(key_values({"db.system": "mysql", "telemetry.sdk.language": "c"}))
        assert labels == ClassificationLabels("non-web", "Databases", "mysql")

    @pytest.mark.parametrize(
        "key, category",
        [
            ("aws.s3.bucket", "Object Store"),
            ("faas.trigger", "FAAS (Function as a service)"),
            ("feature_flag.key", "Feature Flag"),
        ],
    )
    def test_other_categories(self, key, category):
        labels = classify(key_values({key: "value"}))
        assert labels.category == category
        assert labels.sub_category == "value"

    def test_db_system_precedes_rpc_system(self):
        labels = classify(key_values({"rpc.system": "grpc", "db.system": "postgresql"}))
        assert labels.category == "Databases"
        assert labels.sub_category == "postgresql"
        # rpc.* still makes it a web transaction
        assert labels.type == "web"

    @pytest.mark.parametrize("key", ["http.url", "user_agent.original", "rpc.service", "HTTP.Route", " rpc.method "])
    def test_web_prefixes(self, key):
        assert classify(key_values({"service.name": "api", key: "x"})).type == "web"

    @pytest.mark.parametrize("key", ["service.name", "httpx.version", "user_agent", "grpc.status", "db.system"])
    def test_non_web_keys(self, key):
        assert classify(key_values({key: "x"})).type == "non-web"

    def test_web_regardless_of_position(self):
        labels = classify(
            key_values({"db.system": "mysql"}),
            key_values({"user_agent.name": "curl"}),
            key_values({"service.name": "api"}),
        )
        assert labels.type == "web"

    def test_keys_lowercased_and_trimmed(self):
        labels = classify(key_values({"  DB.System ": "mysql"}))
        assert labels == ClassificationLabels("non-web", "Databases", "mysql")

    def test_later_list_overwrites(self):
        labels = classify(key_values({"db.system": "mysql"}), key_values({"db.system": "postgresql"}))
        assert labels.sub_category == "postgresql"

    def test_non_string_values_rendered_as_text(self):
        assert classify(key_values({"db.system": 5})).sub_category == "5"
        assert classify(key_values({"feature_flag.key": True})).sub_category == "true"
        assert classify(key_values({"db.system": ["a"]})).sub_category == ""

    def test_custom_rules(self):
        rules = (("service.name", "Service"),)
        labels = classify(key_values({"db.system": "mysql", "service.name": "api"}), rules=rules)
        assert labels == ClassificationLabels("non-web", "Service", "api")

    def test_rule_table_order(self):
        assert [key for key, _ in CATEGORY_RULES] == [
            "http.request.method",
            "db.system",
            "messaging.system",
            "rpc.system",
            "aws.s3.bucket",
            "exception.type",
            "faas.trigger",
            "feature_flag.key",
            "telemetry.sdk.language",
        ]


class TestNormalizeClassification:
    """Tests for the classification cascade."""

    def test_without_previous_returns_fresh(self):
        attrs = key_values({"db.system": "mysql"})
        assert normalize_classification(None, attrs) == classify(attrs)

    def test_new_category_wins_and_becomes_web(self):
        previous = ClassificationLabels("non-web", "Programming Language", "go")
        labels = normalize_classification(previous, key_values({"rpc.system": "GRPC"}))
        assert labels == ClassificationLabels("web", "RPC Systems", "GRPC")

    def test_web_is_sticky(self):
        previous = ClassificationLabels("web", "HTTP", "GET")
        labels = normalize_classification(previous, key_values({"db.system": "redis"}))
        assert labels == ClassificationLabels("web", "Databases", "redis")

    def test_inherits_category_when_none_found(self):
        previous = ClassificationLabels("non-web", "Databases", "mysql")
        labels = normalize_classification(previous, key_values({"service.name": "api"}))
        assert labels == previous

    def test_inherits_category_but_takes_web_type(self):
        previous = ClassificationLabels("non-web", "Databases", "mysql")
        labels = normalize_classification(previous, key_values({"http.route": "/users"}))
        assert labels == ClassificationLabels("web", "Databases", "mysql")

    @pytest.mark.parametrize(
        "labels",
        [
            ClassificationLabels(),
            ClassificationLabels("web", "HTTP", "POST"),
            ClassificationLabels("non-web", "Databases", "mysql"),
        ],
    )
    def test_empty_attributes_are_identity(self, labels):
        assert normalize_classification(labels, []) == labels
        assert normalize_classification(labels) == labels

    def test_three_level_cascade(self):
        resource = classify(key_values({"telemetry.sdk.language": "python"}))
        scope = normalize_classification(resource, key_values({"otel.scope": "x"}))
        span = normalize_classification(scope, key_values({"http.route": "/"}))
        assert span == ClassificationLabels("web", "Programming Language", "python")
