"""
DeliveryClient: POST one batch to the collector and interpret the answer.

Per flush cycle:

    IDLE -> ENCODING -> SENDING -> ACKNOWLEDGED | REJECTED | TRANSPORT_FAILED
                 \\-> ENCODING_FAILED

Only ACKNOWLEDGED (HTTP 202) lets the caller drop the batch from the queue.
The collector accepts or rejects a batch as a whole.
"""

import enum

import requests

from .config import log
from .constants import (
    ACCEPTED_STATUS, API_TIMEOUT_SEND, DEFAULT_MAX_RETRIES, SESSION_RESET_AFTER,
)
from .codec import encode_batch
from .errors import CodecError, TransportError, DeliveryRejected
from . import http_client


class DeliveryState(enum.Enum):
    IDLE = "idle"
    ENCODING = "encoding"
    SENDING = "sending"
    ACKNOWLEDGED = "acknowledged"
    REJECTED = "rejected"
    TRANSPORT_FAILED = "transport_failed"
    ENCODING_FAILED = "encoding_failed"


class DeliveryClient:
    def __init__(self, endpoint, session=None, timeout=API_TIMEOUT_SEND,
                 max_retries=DEFAULT_MAX_RETRIES, headers=None):
        self.endpoint = endpoint
        self.timeout = timeout
        self._max_retries = max_retries
        self._headers = dict(headers or {})
        self._owns_session = session is None
        self._session = session if session is not None else http_client.create_session(max_retries)
        self._transport_failures = 0
        self.state = DeliveryState.IDLE

    def send(self, batch):
        """POST batch. Returns the 202 response; raises CodecError, TransportError, DeliveryRejected."""
        self.state = DeliveryState.ENCODING
        body = encode_batch(batch)

        headers = dict(self._headers)
        headers["Content-Type"] = "application/json"

        self.state = DeliveryState.SENDING
        try:
            resp = self._session.post(self.endpoint, data=body, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(str(e)) from e

        if resp.status_code != ACCEPTED_STATUS:
            raise DeliveryRejected(resp.status_code, (resp.text or "")[:200])
        return resp

    def deliver(self, batch) -> DeliveryState:
        """Run one send and absorb its failures. Returns the terminal state."""
        try:
            self.send(batch)
        except CodecError as e:
            self.state = DeliveryState.ENCODING_FAILED
            log.error("Batch of %d not sent, encoding failed: %s", len(batch), e)
        except TransportError as e:
            self.state = DeliveryState.TRANSPORT_FAILED
            self._transport_failures += 1
            log.warning("Batch of %d not sent, network error: %s", len(batch), e)
            if self._owns_session and self._transport_failures >= SESSION_RESET_AFTER:
                log.info("Resetting HTTP session after %d network errors", self._transport_failures)
                self._session = http_client.reset_session(self._session, self._max_retries)
                self._transport_failures = 0
        except DeliveryRejected as e:
            self.state = DeliveryState.REJECTED
            self._transport_failures = 0
            log.warning("Batch of %d rejected: HTTP %d %s", len(batch), e.status_code, e.body)
        else:
            self.state = DeliveryState.ACKNOWLEDGED
            self._transport_failures = 0
            log.info("Batch of %d accepted by %s", len(batch), self.endpoint)
        return self.state

    def close(self):
        if self._owns_session:
            self._session.close()
