"""
qcore/stages.py - Gate-Stage State Machine

Advances a QubitRegister through the fixed stage sequence

    IDLE -> SUPERPOSITION -> ENTANGLEMENT -> PHASE -> MEASURE -> DONE

Each working stage runs a budget of iterations proportional to gate_count,
and each iteration consumes one PRSG tick before touching the register.
Algorithm identity only labels the run; the stage algorithm never changes.
"""

import logging
import math
from typing import Dict, List, Optional, Tuple

from .constants import Stage, WORD_BITS
from .errors import QuantumSimError
from .prsg import Prsg
from .register import QubitRegister
from .types_profile import AlgorithmProfile, validate_profile
from .types_result import StageTrace

logger = logging.getLogger(__name__)

# =============================================================================
# TRANSITIONS
# =============================================================================

_TRANSITIONS: Dict[Stage, Optional[Stage]] = {
    Stage.IDLE: Stage.SUPERPOSITION,
    Stage.SUPERPOSITION: Stage.ENTANGLEMENT,
    Stage.ENTANGLEMENT: Stage.PHASE,
    Stage.PHASE: Stage.MEASURE,
    Stage.MEASURE: Stage.DONE,
    Stage.DONE: None,
}

if set(_TRANSITIONS) != set(Stage):
    raise QuantumSimError("stage transition table does not cover every Stage")


def next_stage(stage: Stage) -> Stage:
    """
    Successor of stage.

    Raises:
        QuantumSimError: From DONE, which only reset() leaves
    """
    successor = _TRANSITIONS[stage]
    if successor is None:
        raise QuantumSimError("DONE is terminal; reset() before starting a new run")
    return successor


def stage_budget(stage: Stage, gate_count: int) -> int:
    """Iterations a stage runs for gate_count gates."""
    if stage in (Stage.SUPERPOSITION, Stage.PHASE):
        return math.ceil(gate_count / 4)
    if stage is Stage.ENTANGLEMENT:
        return math.ceil(gate_count / 2)
    if stage is Stage.MEASURE:
        return 1
    return 0


# =============================================================================
# MACHINE
# =============================================================================

class GateStageMachine:
    """One run's exclusive PRSG + register, driven stage by stage."""

    def __init__(self, profile: AlgorithmProfile, prsg: Optional[Prsg] = None):
        self.profile = validate_profile(profile)
        self.prsg = prsg if prsg is not None else Prsg()
        self.prsg.reseed()
        self.register = QubitRegister(profile.qubit_count)
        self.stage = Stage.IDLE
        self.measurement: Optional[Tuple[int, ...]] = None
        self.measurement_ready = False
        self.trajectory: List[StageTrace] = []

    def reset(self) -> None:
        """Back to IDLE: PRSG at its seed, register at ground state."""
        self.prsg.reseed()
        self.register.reset()
        self.stage = Stage.IDLE
        self.measurement = None
        self.measurement_ready = False
        self.trajectory = []

    def step(self) -> Stage:
        """
        Execute the current stage to completion and transition.

        Returns:
            Stage: The stage entered
        """
        stage = self.stage
        if stage is Stage.IDLE:
            pass
        elif stage is Stage.SUPERPOSITION:
            self._run_superposition()
        elif stage is Stage.ENTANGLEMENT:
            self._run_entanglement()
        elif stage is Stage.PHASE:
            self._run_phase()
        elif stage is Stage.MEASURE:
            self._run_measure()
        self.stage = next_stage(stage)
        return self.stage

    def run(self) -> Tuple[int, ...]:
        """
        Run from IDLE to DONE.

        Returns:
            tuple: Measurement bits, qubit 0 first

        Raises:
            QuantumSimError: If the machine is not IDLE
        """
        if self.stage is not Stage.IDLE:
            raise QuantumSimError(f"run() requires IDLE, machine is {self.stage.name}")
        while self.stage is not Stage.DONE:
            self.step()
        logger.debug(
            "%s: %d qubits, %d gates, %d PRSG ticks, collapse=%s",
            self.profile.name, self.profile.qubit_count, self.profile.gate_count,
            self.prsg.ticks, "".join(map(str, self.measurement)),
        )
        return self.measurement

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _run_superposition(self) -> None:
        width = min(self.profile.qubit_count, WORD_BITS)
        iterations = stage_budget(Stage.SUPERPOSITION, self.profile.gate_count)
        for _ in range(iterations):
            self.prsg.next()
            self.register.apply_xor_mask(self.prsg.peek(width))
        self._trace(Stage.SUPERPOSITION, iterations)

    def _run_entanglement(self) -> None:
        iterations = stage_budget(Stage.ENTANGLEMENT, self.profile.gate_count)
        for _ in range(iterations):
            self.prsg.next()
            self.register.apply_controlled_update(0, 1)
        self._trace(Stage.ENTANGLEMENT, iterations)

    def _run_phase(self) -> None:
        iterations = stage_budget(Stage.PHASE, self.profile.gate_count)
        for _ in range(iterations):
            self.prsg.next()
            self.register.apply_phase_increment(self.prsg.peek(16))
        self._trace(Stage.PHASE, iterations)

    def _run_measure(self) -> None:
        self.measurement = self.register.collapse(self.prsg.state)
        self.measurement_ready = True
        self._trace(Stage.MEASURE, 1)

    def _trace(self, stage: Stage, iterations: int) -> None:
        self.trajectory.append(StageTrace(
            stage=stage,
            iterations=iterations,
            prsg_state=self.prsg.state,
            words=self.register.words(),
        ))
