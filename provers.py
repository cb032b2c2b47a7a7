"""Adapters for the external provers.

The subject proof is a Groth16 proof produced by snarkjs; the bridge proof
is an UltraHonk proof of a Noir circuit produced by nargo and bb. Both run
as subprocesses in a scratch directory. A failure is reported as
ExternalProverError with the tool's stderr and is never retried here.
"""
import json
import logging
import os
import subprocess
import tempfile

import attr
import tomli_w

from bridge import BridgeCommitment, bridge_circuit_inputs
from errors import ExternalProverError

logger = logging.getLogger(__name__)

SNARKJS = os.environ.get("SYRA_SNARKJS", "snarkjs")
NARGO = os.environ.get("SYRA_NARGO", "nargo")
BB = os.environ.get("SYRA_BB", "bb")


@attr.s(frozen=True)
class ProofResult(object):
    proof = attr.ib()
    public_signals = attr.ib()


@attr.s(frozen=True)
class BridgeProof(object):
    proof = attr.ib()
    witness = attr.ib()


def run_tool(cmd, cwd=None):
    logger.info("running %s", " ".join(cmd))
    try:
        output = subprocess.run(cmd, cwd=cwd, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                                universal_newlines=True)
    except OSError as e:
        raise ExternalProverError("could not start %s: %s" % (cmd[0], e))
    if output.returncode != 0:
        raise ExternalProverError("%s exited with status %d" % (cmd[0], output.returncode),
                                  stderr=output.stderr)
    return output.stdout


class Groth16Prover(object):
    def __init__(self, wasm_path, zkey_path, snarkjs=None):
        self.wasm_path = wasm_path
        self.zkey_path = zkey_path
        self.snarkjs = snarkjs or SNARKJS

    def prove(self, inputs):
        with tempfile.TemporaryDirectory() as workdir:
            input_path = os.path.join(workdir, "input.json")
            proof_path = os.path.join(workdir, "proof.json")
            public_path = os.path.join(workdir, "public.json")
            with open(input_path, "w") as f:
                json.dump(inputs, f)

            run_tool([self.snarkjs, "groth16", "fullprove", input_path,
                      self.wasm_path, self.zkey_path, proof_path, public_path])

            with open(proof_path) as f:
                proof = json.load(f)
            with open(public_path) as f:
                public_signals = json.load(f)
        return ProofResult(proof=proof, public_signals=public_signals)


class NoirBridgeBackend(object):
    """nargo computes the witness from Prover.toml, bb turns it into a proof."""

    def __init__(self, circuit_dir, name, nargo=None, bb=None):
        self.circuit_dir = circuit_dir
        self.name = name
        self.nargo = nargo or NARGO
        self.bb = bb or BB

    def prove(self, inputs):
        target = os.path.join(self.circuit_dir, "target")
        with open(os.path.join(self.circuit_dir, "Prover.toml"), "wb") as f:
            tomli_w.dump(inputs, f)

        run_tool([self.nargo, "execute", self.name], cwd=self.circuit_dir)

        with tempfile.TemporaryDirectory() as workdir:
            run_tool([self.bb, "prove",
                      "-b", os.path.join(target, self.name + ".json"),
                      "-w", os.path.join(target, self.name + ".gz"),
                      "-o", workdir])
            with open(os.path.join(workdir, "proof"), "rb") as f:
                proof = f.read()
        with open(os.path.join(target, self.name + ".gz"), "rb") as f:
            witness = f.read()
        return BridgeProof(proof=proof, witness=witness)


def prove_bridge(backend, claims, jwt_inputs, commitment=None, current_time=None):
    """Commit to the subject and prove the commitment matches the token.

    The returned commitment carries the (s, r) the Syra proof must reuse.
    """
    if commitment is None:
        commitment = BridgeCommitment.from_subject(claims["sub"])
    inputs = bridge_circuit_inputs(commitment, claims, jwt_inputs, current_time)
    return commitment, backend.prove(inputs)
