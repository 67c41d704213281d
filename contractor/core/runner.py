from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from contractor.core.models import InstanceReport, PuzzleInstance, RunOutcome, Verdict
from contractor.core.network import CONTRACT_EXTENSION, Environment, classify_instance, find_instances, scan_all
from contractor.core.registry import SolverRegistry


logger = logging.getLogger(__name__)

AuditSink = Callable[[dict[str, Any]], None]


class RunMode(str, Enum):
    DRY = "dry"
    SUBMIT = "submit"


@dataclass(frozen=True)
class RunOptions:
    mode: RunMode = RunMode.DRY
    home: str = "home"
    target: str | None = None
    type_filter: str | None = None
    extension: str = CONTRACT_EXTENSION
    submit_delay: float = 0.01


def format_answer(answer: Any) -> str:
    if isinstance(answer, str):
        return answer
    return json.dumps(answer)


def process_instance(
    env: Environment,
    registry: SolverRegistry,
    instance: PuzzleInstance,
    options: RunOptions,
) -> InstanceReport:
    """Route one classified instance through lookup, solver and gate.

    Never raises for solver problems; those come back as FAILED or
    NO_ANSWER. ``submit`` is called at most once, and only in SUBMIT mode
    with a real answer.
    """
    entry = registry.lookup(instance.type)
    if entry is None:
        logger.info("SKIP (no solver): %s", instance.label)
        return InstanceReport(instance=instance, verdict=Verdict.SKIP)

    try:
        answer = entry.dispatch(instance.payload)
    except Exception as e:
        logger.warning("FAILED (exception): %s -> %s", instance.label, e)
        return InstanceReport(instance=instance, verdict=Verdict.FAILED, error=str(e))

    if answer is None:
        logger.warning("FAILED (no answer): %s", instance.label)
        return InstanceReport(instance=instance, verdict=Verdict.NO_ANSWER)

    if options.mode is not RunMode.SUBMIT:
        logger.info("DRY: %s answer=%s", instance.label, format_answer(answer))
        return InstanceReport(instance=instance, verdict=Verdict.DRY, answer=answer)

    reward = env.submit(answer, instance.filename, instance.host)
    if reward:
        logger.info("SOLVED: %s reward=%s", instance.label, reward)
        return InstanceReport(instance=instance, verdict=Verdict.SOLVED, answer=answer, reward=reward)

    logger.warning("WRONG: %s answer tried=%s", instance.label, format_answer(answer))
    return InstanceReport(instance=instance, verdict=Verdict.WRONG, answer=answer)


def run(
    env: Environment,
    registry: SolverRegistry,
    options: RunOptions = RunOptions(),
    sleep: Callable[[float], None] = time.sleep,
    audit: AuditSink | None = None,
) -> RunOutcome:
    hosts = [options.target] if options.target else scan_all(env, options.home)
    locations = find_instances(env, hosts, options.extension)

    outcome = RunOutcome()
    if not locations:
        logger.info("No coding contracts found on %d host(s).", len(hosts))
        return outcome

    logger.info("Found %d contract(s). Mode=%s", len(locations), options.mode.value.upper())

    for host, filename in locations:
        instance = classify_instance(env, host, filename)
        if options.type_filter and instance.type != options.type_filter:
            continue

        report = process_instance(env, registry, instance, options)
        outcome = outcome.with_report(report)

        if report.verdict in (Verdict.SOLVED, Verdict.WRONG):
            if audit is not None:
                audit(
                    {
                        "event": "contract_submit",
                        "host": host,
                        "file": filename,
                        "type": instance.type,
                        "verdict": report.verdict.value,
                        "answer": report.answer,
                        "reward": report.reward,
                    }
                )
            sleep(options.submit_delay)

    logger.info(
        "Done. Attempted=%d, Solved=%d, Skipped=%d, Found=%d",
        outcome.attempted,
        outcome.solved,
        outcome.skipped,
        outcome.found,
    )
    if audit is not None:
        audit({"event": "run_complete", "mode": options.mode.value, **outcome.summary()})
    return outcome
