import json
from unittest.mock import patch

import pytest
from aiokafka.errors import KafkaConnectionError, KafkaTimeoutError

from graphbridge.core.exceptions import ReplyDeliveryError
from graphbridge.orchestration.publisher import ReplyPublisher


class StubKafkaProducer:
    instances = []

    def __init__(self, bootstrap_servers, start_error=None, send_error=None):
        self.bootstrap_servers = bootstrap_servers
        self.start_error = start_error
        self.send_error = send_error
        self.sent = []
        self.started = False
        self.stopped = False
        StubKafkaProducer.instances.append(self)

    async def start(self):
        if self.start_error:
            raise self.start_error
        self.started = True

    async def send_and_wait(self, topic, value, key=None):
        if self.send_error:
            raise self.send_error
        self.sent.append((topic, value, key))

    async def stop(self):
        self.stopped = True


@pytest.fixture(autouse=True)
def reset_instances():
    StubKafkaProducer.instances = []


def patched_producer(**errors):
    return patch(
        "graphbridge.orchestration.publisher.AIOKafkaProducer",
        side_effect=lambda bootstrap_servers: StubKafkaProducer(bootstrap_servers, **errors),
    )


@pytest.mark.asyncio
async def test_publish_keys_reply_by_exchange_id():
    publisher = ReplyPublisher(bootstrap_servers="kafka:9092")
    reply = {"id": "ex-1", "headers": {"Neo4jNodeId": 14}}

    with patched_producer():
        await publisher.publish("replies", reply)
        await publisher.publish("replies", {"id": "ex-2", "headers": {}})
        await publisher.close()

    assert len(StubKafkaProducer.instances) == 1
    producer = StubKafkaProducer.instances[0]
    assert producer.bootstrap_servers == "kafka:9092"
    topic, value, key = producer.sent[0]
    assert (topic, key) == ("replies", b"ex-1")
    assert json.loads(value) == reply
    assert producer.sent[1][2] == b"ex-2"
    assert producer.stopped


@pytest.mark.asyncio
async def test_publish_without_exchange_id_is_unkeyed():
    publisher = ReplyPublisher(bootstrap_servers="kafka:9092")

    with patched_producer():
        await publisher.publish("replies", {"id": None, "headers": {}, "error": {"error_code": "MALFORMED_MESSAGE"}})

    assert StubKafkaProducer.instances[0].sent[0][2] is None


@pytest.mark.asyncio
async def test_failed_send_raises_delivery_error():
    publisher = ReplyPublisher(bootstrap_servers="kafka:9092")

    with patched_producer(send_error=KafkaTimeoutError()):
        with pytest.raises(ReplyDeliveryError) as excinfo:
            await publisher.publish("replies", {"id": "ex-3", "headers": {}})

    assert excinfo.value.details == {"exchange_id": "ex-3", "topic": "replies"}


@pytest.mark.asyncio
async def test_unreachable_broker_raises_delivery_error_and_retries_later():
    publisher = ReplyPublisher(bootstrap_servers="kafka:9092")

    with patched_producer(start_error=KafkaConnectionError()):
        with pytest.raises(ReplyDeliveryError):
            await publisher.publish("replies", {"id": "ex-4", "headers": {}})

    with patched_producer():
        await publisher.publish("replies", {"id": "ex-5", "headers": {}})

    assert StubKafkaProducer.instances[-1].sent[0][2] == b"ex-5"
