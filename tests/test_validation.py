from transaction_view.core.validation import (
    get_amount_error,
    get_ethereum_address_error,
    get_optional_positive_error,
    validate_create_request,
)

ADDRESS = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"


def test_address_errors():
    assert get_ethereum_address_error(ADDRESS) is None
    assert get_ethereum_address_error(f"  {ADDRESS}  ") is None
    assert get_ethereum_address_error("") == "Address is required"
    assert get_ethereum_address_error(None) == "Address is required"
    assert get_ethereum_address_error("   ") == "Address is required"
    assert get_ethereum_address_error("742d35Cc") == "Address must start with 0x"
    assert get_ethereum_address_error("0x742d").startswith("Address is too short")
    assert get_ethereum_address_error(ADDRESS + "00").startswith("Address is too long")
    assert get_ethereum_address_error("0x" + "g" * 40).startswith(
        "Address contains invalid characters"
    )
    assert get_ethereum_address_error(ADDRESS.lower()) is None


def test_amount_and_gas_errors():
    assert get_amount_error("0.01") is None
    assert get_amount_error("") == "Amount is required"
    assert get_amount_error("0") == "Amount must be a positive number"
    assert get_amount_error("abc") == "Amount must be a positive number"
    assert get_optional_positive_error(None, "Gas limit") is None
    assert get_optional_positive_error("", "Gas limit") is None
    assert get_optional_positive_error("21000", "Gas limit") is None
    assert get_optional_positive_error("-5", "Gas price") == "Gas price must be a positive number"


def test_validate_create_request():
    assert validate_create_request({"toAddress": ADDRESS, "amount": "1"}) == {}
    errors = validate_create_request({"toAddress": "nope", "amount": "1", "gasPrice": "0"})
    assert errors == {
        "toAddress": "Address must start with 0x",
        "gasPrice": "Gas price must be a positive number",
    }
