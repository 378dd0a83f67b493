"""Shared test fixtures for reqlint."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from reqlint.engine.pipeline import ValidationPipeline
from reqlint.parser.loader import SpecLoader
from reqlint.schema.resolver import SchemaResolver
from reqlint.service.spec_store import SpecStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"
PETSTORE_V3 = FIXTURES_DIR / "petstore_v3.yaml"
PETSTORE_V2 = FIXTURES_DIR / "petstore_v2.json"


@pytest.fixture
def loader() -> SpecLoader:
    return SpecLoader()


@pytest.fixture
def pipeline() -> ValidationPipeline:
    return ValidationPipeline()


@pytest.fixture
def store() -> SpecStore:
    return SpecStore()


@pytest.fixture
def petstore_v3(loader: SpecLoader) -> dict[str, Any]:
    """The OpenAPI 3 petstore fixture as a plain dict."""
    return loader.load(PETSTORE_V3)


@pytest.fixture
def petstore_v2(loader: SpecLoader) -> dict[str, Any]:
    """The OpenAPI 2 (definitions-style) fixture as a plain dict."""
    return loader.load(PETSTORE_V2)


@pytest.fixture
def resolver(petstore_v3: dict[str, Any]) -> SchemaResolver:
    return SchemaResolver(petstore_v3)


SAMPLE_SPEC_YAML = """\
openapi: 3.0.0
info:
  title: Users API
  version: '1.0'
paths:
  /users:
    post:
      operationId: createUser
      requestBody:
        content:
          application/json:
            schema:
              $ref: '#/components/schemas/User'
  /users/{id}:
    get:
      operationId: getUser
components:
  schemas:
    User:
      type: object
      required: [id, name]
      properties:
        id:
          type: integer
        name:
          type: string
        address:
          type: object
          properties:
            zip:
              type: string
        tags:
          type: array
          items:
            type: string
"""
