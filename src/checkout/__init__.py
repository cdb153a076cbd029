"""Checkout service: converts saved carts into durable orders."""
