"""
qcore/synthesis.py - Circuit Description Documents

Pure functions producing the two documents handed to the synthesis
toolchain: the Verilog circuit description and the PCF pin constraints.
The engine never parses these back.
"""

import re
from dataclasses import dataclass

from .constants import CONTROL_PINS, GROUND_STATE, PIN_POOL, PRSG_SEED, PRSG_TAPS, Stage
from .stages import stage_budget
from .types_profile import AlgorithmProfile

CORE_MODULE = "quantum_core"


@dataclass(frozen=True)
class CircuitDesign:
    """Documents for one profile."""
    profile: AlgorithmProfile
    top_module: str
    verilog: str
    pin_constraints: str


def module_name(profile: AlgorithmProfile) -> str:
    """Verilog-safe wrapper module name for the profile."""
    name = re.sub(r"\W", "_", profile.name.strip())
    if name[:1].isdigit():
        name = "_" + name
    return f"quantum_{name}"


def pin_for(index: int) -> int:
    """Physical pin for output bit index; wraps around the pool."""
    return PIN_POOL[index % len(PIN_POOL)]


def render_pin_constraints(profile: AlgorithmProfile) -> str:
    """PCF document: control pins, then one set_io per result bit."""
    lines = ["# Clock and control signals"]
    lines += [f"set_io {signal} {pin}" for signal, pin in CONTROL_PINS.items()]
    lines += ["", "# Qubit output assignments"]
    shared = {pin: signal for signal, pin in CONTROL_PINS.items()}
    lines += [
        f"# result[{i}] shares pin {pin_for(i)} with {shared[pin_for(i)]}"
        for i in range(profile.qubit_count)
        if pin_for(i) in shared
    ]
    lines += [f"set_io result[{i}] {pin_for(i)}" for i in range(profile.qubit_count)]
    return "\n".join(lines) + "\n"


def render_circuit(profile: AlgorithmProfile) -> str:
    """Verilog for the gate-stage core plus the profile's wrapper module."""
    q = profile.qubit_count
    top = q - 1
    feedback = " ^ ".join(f"lfsr[{tap}]" for tap in PRSG_TAPS)
    superposition = stage_budget(Stage.SUPERPOSITION, profile.gate_count)
    entanglement = stage_budget(Stage.ENTANGLEMENT, profile.gate_count)
    phase = stage_budget(Stage.PHASE, profile.gate_count)
    entangle_op = (
        "qubit_state[1] <= qubit_state[1] ^ qubit_state[0];"
        if q > 1 else "// single qubit: controlled update is a no-op"
    )

    return f"""// Quantum gate-stage core
// Algorithm: {profile.name}, Qubits: {q}, Gates: {profile.gate_count}
module {CORE_MODULE} (
    input wire clk,
    input wire reset,
    input wire [{top}:0] qubit_input,
    output reg [{top}:0] qubit_output,
    output reg measurement_ready
);

    reg [31:0] qubit_state [0:{top}];
    reg [31:0] gate_counter;
    reg [2:0] stage;

    parameter IDLE = 3'b000;
    parameter SUPERPOSITION = 3'b001;
    parameter ENTANGLEMENT = 3'b010;
    parameter PHASE = 3'b011;
    parameter MEASURE = 3'b100;
    parameter DONE = 3'b101;

    reg [31:0] lfsr;
    wire lfsr_feedback = {feedback};
    wire [31:0] lfsr_next = {{lfsr[30:0], lfsr_feedback}};

    integer i;

    always @(posedge clk or posedge reset) begin
        if (reset) begin
            stage <= IDLE;
            gate_counter <= 0;
            measurement_ready <= 0;
            qubit_output <= 0;
            lfsr <= 32'h{PRSG_SEED:08X};
            for (i = 0; i < {q}; i = i + 1) begin
                qubit_state[i] <= 32'h{GROUND_STATE:08X};
            end
        end else begin
            case (stage)
                IDLE: begin
                    if (qubit_input != 0) begin
                        stage <= SUPERPOSITION;
                        gate_counter <= 0;
                    end
                end

                SUPERPOSITION: begin
                    if (gate_counter < {superposition}) begin
                        lfsr <= lfsr_next;
                        for (i = 0; i < {q}; i = i + 1) begin
                            qubit_state[i] <= qubit_state[i] ^ (i < 32 ? lfsr_next[i] : 1'b0);
                        end
                        gate_counter <= gate_counter + 1;
                    end else begin
                        stage <= ENTANGLEMENT;
                        gate_counter <= 0;
                    end
                end

                ENTANGLEMENT: begin
                    if (gate_counter < {entanglement}) begin
                        lfsr <= lfsr_next;
                        {entangle_op}
                        gate_counter <= gate_counter + 1;
                    end else begin
                        stage <= PHASE;
                        gate_counter <= 0;
                    end
                end

                PHASE: begin
                    if (gate_counter < {phase}) begin
                        lfsr <= lfsr_next;
                        for (i = 0; i < {q}; i = i + 1) begin
                            qubit_state[i] <= {{qubit_state[i][31:16],
                                               qubit_state[i][15:0] + lfsr_next[15:0]}};
                        end
                        gate_counter <= gate_counter + 1;
                    end else begin
                        stage <= MEASURE;
                    end
                end

                MEASURE: begin
                    for (i = 0; i < {q}; i = i + 1) begin
                        qubit_output[i] <= (i < 32 ? lfsr[i] : 1'b0) ^ qubit_state[i][0];
                    end
                    measurement_ready <= 1;
                    stage <= DONE;
                end

                DONE: begin
                    // terminal until reset
                end
            endcase
        end
    end

endmodule

module {module_name(profile)} (
    input wire clk,
    input wire reset,
    output wire [{top}:0] result,
    output wire algorithm_complete
);

    {CORE_MODULE} core_inst (
        .clk(clk),
        .reset(reset),
        .qubit_input({{{q}{{1'b1}}}}),
        .qubit_output(result),
        .measurement_ready(algorithm_complete)
    );

endmodule
"""


def build_design(profile: AlgorithmProfile) -> CircuitDesign:
    """Both documents for profile."""
    return CircuitDesign(
        profile=profile,
        top_module=module_name(profile),
        verilog=render_circuit(profile),
        pin_constraints=render_pin_constraints(profile),
    )
