"""
Sales Order UI: a Reflex application for browsing and managing tailoring orders.

This package keeps a paginated, searchable order list consistent with the
detail view of a selected order and with the mutations applied to it
(line item edits, status changes, payments).

Subpackages:
- sync: List synchronizer, detail loader, mutation coordinator, debouncer
  and viewport trigger (the framework independent engine)
- models: Order data models, snapshots and serialization
- services: Transport gateways (demo and GraphQL) and the typed order service
- components: Reflex UI components
- data: Static demo fixtures

Main entry points:
- workspace.OrderWorkspace: Wires the engine for one screen session
- app.main(): Start the development server
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
