"""
Portal Service package.

A backend for the card application. It fronts the Gnosis Pay card platform,
forwarding each route to one upstream call with the caller's bearer token,
and adds local accounts plus transactional email and SMS.

Structure:
- app.main: PortalService, wiring clients, services and routers.
- app.adapters: card platform, database, SMS and SMTP clients.
- app.domain: auth, card and KYC services, guards, local accounts, audit trail.
- app.routers: HTTP routes, one module per area.
- app.notifications: i18n catalogues and email templates.
"""
