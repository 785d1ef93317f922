from decimal import Decimal

# RFID tag -> product; used when CATALOG_PATH is not set
DEFAULT_CATALOG = {
    "4D00A7B52F70": {"name": "Dark Fantasy", "price": Decimal("50.00")},
    "4D00A6F2554C": {"name": "Bread Board", "price": Decimal("50.00")},
    "4D00A6F2253C": {"name": "Product3", "price": Decimal("20.00")},
    "4D00A7B594CB": {"name": "Product4", "price": Decimal("30.00")},
}

# the only message displays ever receive: "go refetch /cart"
CART_CHANGED_SIGNAL = "update_cart"

BILL_FILENAME = "bill.pdf"
RECEIPT_PREFIX = "receipt_"
