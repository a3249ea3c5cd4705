# orders/tests/helpers.py

from decimal import Decimal

from orders.services import pricing
from orders.services.order_service import CustomerInfo, OrderLineRequest, OrderRequest
from products.models import Category, Product

CUSTOMER = {
    "email": "buyer@techmart.test",
    "firstName": "Budi",
    "lastName": "Santoso",
    "address": "Jl. Merdeka 10",
    "city": "Jakarta",
    "postalCode": "10110",
    "phone": "+62 812 0000 0000",
}


def make_product(*, name="USB-C Cable", price="10.00", stock=5, is_active=True, category=None):
    return Product.objects.create(
        name_en=name,
        name_id=f"{name} (ID)",
        price=Decimal(price),
        stock=stock,
        is_active=is_active,
        category=category,
    )


def make_category(name_en="Accessories", name_id="Aksesori"):
    return Category.objects.create(name_en=name_en, name_id=name_id)


def expected_total(lines) -> Decimal:
    subtotal = sum((Decimal(str(price)) * qty for price, qty in lines), Decimal("0.00"))
    return pricing.quote(subtotal).total


def order_payload(products_and_qty, *, total=None, customer=None, **extra):
    """
    Wire payload for POST /api/orders/.

    products_and_qty: [(product, quantity), ...]
    total defaults to the correctly computed server total.
    """
    items = [
        {
            "id": product.pk,
            "name": product.name_en,
            "price": str(product.price),
            "quantity": qty,
            "stock": product.stock,
        }
        for product, qty in products_and_qty
    ]
    if total is None:
        total = expected_total([(product.price, qty) for product, qty in products_and_qty])

    payload = {
        "items": items,
        "customerInfo": dict(customer if customer is not None else CUSTOMER),
        "totalAmount": str(total),
    }
    payload.update(extra)
    return payload


def order_request(products_and_qty, *, total=None, idempotency_key="", notes=""):
    """
    Engine-level request equivalent to order_payload().
    """
    if total is None:
        total = expected_total([(product.price, qty) for product, qty in products_and_qty])

    return OrderRequest(
        items=tuple(
            OrderLineRequest(
                product_id=product.pk,
                name=product.name_en,
                unit_price=Decimal(str(product.price)),
                quantity=qty,
                stock=product.stock,
            )
            for product, qty in products_and_qty
        ),
        customer=CustomerInfo(
            email=CUSTOMER["email"],
            first_name=CUSTOMER["firstName"],
            last_name=CUSTOMER["lastName"],
            address=CUSTOMER["address"],
            city=CUSTOMER["city"],
            postal_code=CUSTOMER["postalCode"],
            phone=CUSTOMER["phone"],
        ),
        total_amount=Decimal(str(total)),
        notes=notes,
        idempotency_key=idempotency_key,
    )
