"""Shared BDD step definitions for checkout scenarios."""

from checkout.cart.port import CartLine
from pytest_bdd import given, parsers


@given(parsers.cfparse('the catalogue prices product "{product_id}" at "{price}"'))
def _(catalog, product_id, price):
    catalog.set_price(product_id, price)


@given(parsers.cfparse('the cart holds {quantity:d} of product "{product_id}"'))
def _(cart_store, principal, quantity, product_id):
    lines = cart_store.lines_for(principal.subject_id)
    lines.append(CartLine(product_id, quantity))
    cart_store.put(principal.subject_id, lines)


@given("the cart store cannot be read")
def _(cart_store):
    cart_store.configure(fail_reads=True)


@given("the cart store cannot clear carts")
def _(cart_store):
    cart_store.configure(fail_clears=True)
