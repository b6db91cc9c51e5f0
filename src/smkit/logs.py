"""Tail CloudWatch log streams of SageMaker jobs."""
import collections
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from botocore.exceptions import ClientError

# Position is a tuple that includes the last read timestamp and the number of items that were read
# at that time. This is used to figure out which event to start with on the next read.
Position = collections.namedtuple("Position", ["timestamp", "skip"])


class LogState(Enum):
    """State machine used while tailing the logs of a running job."""

    STARTING = 1
    WAIT_IN_PROGRESS = 2
    TAILING = 3
    JOB_COMPLETE = 4
    COMPLETE = 5


def log_stream(client, log_group: str, stream_name: str, start_time: int = 0, skip: int = 0) -> Iterator[Dict]:
    """Yield the events of a single CloudWatch log stream, starting at ``start_time``.

    Args:
        client: boto3 CloudWatch Logs client.
        log_group (str): Name of the log group.
        stream_name (str): Name of the log stream.
        start_time (int): Timestamp (ms since epoch) of the first event to return.
        skip (int): Number of events at ``start_time`` that were already returned by a previous call.
    """
    next_token: Optional[str] = None

    event_count = 1
    while event_count > 0:
        token_arg = {"nextToken": next_token} if next_token is not None else {}
        response = client.get_log_events(
            logGroupName=log_group,
            logStreamName=stream_name,
            startTime=start_time,
            startFromHead=True,
            **token_arg,
        )
        next_token = response["nextForwardToken"]
        events = response["events"]
        event_count = len(events)
        if event_count > skip:
            events = events[skip:]
            skip = 0
        else:
            skip = skip - event_count
            events = []
        for ev in events:
            yield ev


def multi_stream_iter(
    client, log_group: str, streams: List[str], positions: Dict[str, Position]
) -> Iterator[Tuple[int, Dict[str, Any]]]:
    """Iterate over the events of several log streams in timestamp order.

    Yields:
        (int, dict): index of the stream in ``streams``, and the log event.
    """
    event_iters = [log_stream(client, log_group, s, positions[s].timestamp, positions[s].skip) for s in streams]
    events: List[Optional[Dict]] = []
    for s in event_iters:
        try:
            events.append(next(s))
        except StopIteration:
            events.append(None)

    while any(events):
        i = min(
            (idx for idx, ev in enumerate(events) if ev is not None),
            key=lambda idx: events[idx]["timestamp"],  # type: ignore
        )
        yield i, events[i]  # type: ignore
        try:
            events[i] = next(event_iters[i])
        except StopIteration:
            events[i] = None


def describe_log_streams(client, log_group: str, job_name: str, instance_count: int) -> List[str]:
    """Return the names of the log streams of ``job_name``; empty while the log group does not exist yet."""
    try:
        streams = client.describe_log_streams(
            logGroupName=log_group,
            logStreamNamePrefix=job_name + "/",
            orderBy="LogStreamName",
            limit=min(instance_count, 50),
        )
    except ClientError as e:
        # On the very first training job run on an account, there's no log group until the container starts logging.
        if e.response.get("Error", {}).get("Code") != "ResourceNotFoundException":
            raise
        return []
    return [s["logStreamName"] for s in streams["logStreams"]]
