"""Shared fixtures for relay and client tests."""

import pytest

from voyage_estimator.services.relay_service import RelayService

from fakes import FakeResponse, FakeSession, completion


@pytest.fixture
def fake_session():
    return FakeSession(FakeResponse(200, completion()))


@pytest.fixture
def relay(fake_session):
    return RelayService(
        api_key="sk-test",
        model="gpt-test",
        base_url="https://llm.example.com/v1/",
        system_prompt="You are a voyage estimator.",
        session=fake_session,
    )
