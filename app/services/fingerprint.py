import hashlib


def compute_fingerprint(roll_number: str, certificate_id: str, issue_date: str) -> str:
    """
    Derives a certificate's identity hash.

    SHA-256 over the UTF-8 bytes of the plain concatenation
    `roll_number + certificate_id + issue_date`, as 64 lowercase hex chars.
    Values are hashed exactly as given: no separator, trimming or case
    folding. Any normalization belongs to the caller and would invalidate
    previously issued hashes.

    Example: ('CS-123', 'JHU-84321-2023', '2023-05-20')
        -> sha256('CS-123JHU-84321-20232023-05-20')
    """
    payload = roll_number + certificate_id + issue_date
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
