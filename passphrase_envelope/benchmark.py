"""
Passphrase Envelope Benchmark CLI.

Usage:
    passphrase-envelope-benchmark

Or run directly:
    python -m passphrase_envelope.benchmark

Measures the PBKDF2 cost at the configured iteration count
(PASSPHRASE_ENVELOPE_ITERATIONS, environment or .env file) and suggests a
count that meets the 100ms-per-derivation target on this machine.
"""

from __future__ import annotations

import asyncio
import time

from passphrase_envelope.config import get_config
from passphrase_envelope.kdf import derive_key
from passphrase_envelope.salt import deterministic_salt, random_salt
from passphrase_envelope.service import (
    decrypt_data,
    decrypt_data_async,
    encrypt_data,
    encrypt_data_async,
)

TARGET_KDF_MS: float = 100.0
CALIBRATION_ITERATIONS: int = 10_000
BENCHMARK_PASSPHRASE: str = "benchmark passphrase"


def time_kdf(iterations: int) -> float:
    """Return the duration of one key derivation in milliseconds."""
    salt = random_salt()
    start = time.perf_counter()
    derive_key(BENCHMARK_PASSPHRASE, salt, iterations)
    return (time.perf_counter() - start) * 1000


def suggest_iterations(target_ms: float = TARGET_KDF_MS) -> int:
    """Extrapolate the iteration count needed to reach ``target_ms``."""
    sample_ms = time_kdf(CALIBRATION_ITERATIONS)
    per_iteration = sample_ms / CALIBRATION_ITERATIONS
    return max(CALIBRATION_ITERATIONS, int(target_ms / per_iteration))


async def run_benchmark() -> None:
    """Run the passphrase envelope benchmark."""
    print("=== Passphrase Envelope Benchmark ===\n")

    config = get_config()
    iterations = config.default_iterations

    try:
        user_input = input("Enter number of concurrent envelopes (default: 8): ").strip()
        batch_size = int(user_input) if user_input else 8
    except (ValueError, EOFError):
        batch_size = 8
    print(f"Configured iterations: {iterations}")
    print(f"Concurrent batch size: {batch_size}\n")

    # ========================================================================
    # Demo 1: Key derivation cost
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print("|  Demo 1: PBKDF2-HMAC-SHA256 Key Derivation                        |")
    print("+" + "-" * 68 + "+")

    kdf_ms = time_kdf(iterations)
    suggested = suggest_iterations()
    status = "OK" if kdf_ms >= TARGET_KDF_MS else "WARN"

    print(f"[{status}] {iterations} iterations: {kdf_ms:.3f}ms (target >= {TARGET_KDF_MS:.0f}ms)")
    print(f"[INFO] Suggested iterations for this machine: {suggested}")
    if suggested < iterations:
        print("[INFO] Never lower the count below what existing envelopes use\n")
    else:
        print()

    salt_start = time.perf_counter()
    deterministic_salt(BENCHMARK_PASSPHRASE)
    salt_ms = (time.perf_counter() - salt_start) * 1000
    print(f"[PERF] Deterministic salt: {salt_ms:.3f}ms\n")

    # ========================================================================
    # Demo 2: Encrypt/decrypt round trip
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print("|  Demo 2: Encryption/Decryption Round Trip                         |")
    print("+" + "-" * 68 + "+")

    payload = {"notes": [{"id": i, "content": "x" * 256} for i in range(100)]}

    encrypt_start = time.perf_counter()
    envelope = encrypt_data(payload, BENCHMARK_PASSPHRASE, iterations=iterations)
    encrypt_time = time.perf_counter() - encrypt_start

    decrypt_start = time.perf_counter()
    recovered = decrypt_data(envelope, BENCHMARK_PASSPHRASE)
    decrypt_time = time.perf_counter() - decrypt_start

    print(f"[{'OK' if recovered == payload else 'ERROR'}] Round trip of {len(envelope.ciphertext)} bytes")
    print(f"[PERF] Encryption: {encrypt_time * 1000:.3f}ms ({1.0 / encrypt_time:.2f} ops/sec)")
    print(f"[PERF] Decryption: {decrypt_time * 1000:.3f}ms ({1.0 / decrypt_time:.2f} ops/sec)\n")

    # ========================================================================
    # Demo 3: Concurrent envelopes off the event loop
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print(f"|  Demo 3: {batch_size} Concurrent Envelopes (worker threads)" + " " * (27 - len(str(batch_size))) + "|")
    print("+" + "-" * 68 + "+")

    batch_start = time.perf_counter()
    envelopes = await asyncio.gather(
        *(
            encrypt_data_async({"n": i}, BENCHMARK_PASSPHRASE, iterations=iterations)
            for i in range(batch_size)
        )
    )
    results = await asyncio.gather(
        *(decrypt_data_async(env, BENCHMARK_PASSPHRASE) for env in envelopes)
    )
    batch_duration = time.perf_counter() - batch_start

    ok = results == [{"n": i} for i in range(batch_size)]
    print(f"[{'OK' if ok else 'ERROR'}] {batch_size} envelopes sealed and opened")
    print(f"[PERF] Time: {batch_duration * 1000:.3f}ms | Rate: {2 * batch_size / batch_duration:.2f} ops/sec\n")

    print("=" * 70)
    print("                    BENCHMARK COMPLETE")
    print("=" * 70 + "\n")


def main() -> None:
    """CLI entry point for passphrase-envelope-benchmark command."""
    asyncio.run(run_benchmark())


if __name__ == "__main__":
    main()
