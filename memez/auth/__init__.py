from memez.auth.signature import challenge_message, verify_signature

__all__ = ["challenge_message", "verify_signature"]
