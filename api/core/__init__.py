"""
Cross-cutting building blocks shared by the feature packages.

`core/` holds DB wiring, environment settings, error responses and the
asset-host client. Feature SQL and business rules live in the feature
package itself (e.g. `projects/`).
"""
