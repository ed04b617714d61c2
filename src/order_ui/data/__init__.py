"""
Static and demo data for the Sales Order UI.

This package contains fixture data used by DemoGateway for development,
testing, and demonstrations without a live order API.

Modules:
- demo_orders: Generated orders, payments and payment modes in wire shape
"""
