#| # End-to-end run
#| Issue a credential locally, commit to the subject on Grumpkin, and show
#| the credential for a message. The external circuits are not run here;
#| only the inputs they would receive are printed.
import json
import sys

import codec
import issuer
from bridge import BridgeCommitment, bridge_circuit_inputs
from syra import prove_from_signals, verify_from_proof
from syra_input import generate_signals

CLAIMS = {
    "sub": "109876543210987654321",
    "aud": "1234567890-example.apps.googleusercontent.com",
    "iss": "https://accounts.google.com",
}


if __name__ == '__main__':
    message = sys.argv[1] if len(sys.argv) > 1 else "hello, relying party"

    print("Issuing a credential...")
    secret, ivk = issuer.keygen()
    bridge = BridgeCommitment.from_subject(CLAIMS["sub"])
    usk = issuer.issue_user_key(secret, bridge.s)
    usk_hex, usk_hat_hex = usk.to_hex()

    print("Bridge circuit inputs (excluding token inputs):")
    inputs = bridge_circuit_inputs(bridge, CLAIMS, {})
    print(json.dumps({k: inputs[k] for k in ("g3", "g4", "bridge", "current_time")}, indent=2))

    print("Assembling the statement...")
    signals = generate_signals(ivk.to_hex(), usk_hex, usk_hat_hex, CLAIMS, message, bridge)

    print("Proving...")
    proof = prove_from_signals(signals)
    text = codec.dumps(proof)
    print("Proof size (JSON):", len(text))

    print("Verifying...")
    print("valid:", verify_from_proof(proof))
    print("valid after a JSON round trip:", codec.verify_serialized(text))
