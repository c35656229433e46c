def upload_consent_message(wallet_address: str) -> str:
    return f"Sign this message to upload a file to UniVerify with address {wallet_address}"


def login_consent_message(wallet_address: str) -> str:
    return f"Sign this message to log in to UniVerify with address {wallet_address}"
