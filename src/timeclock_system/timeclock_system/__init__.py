"""Time Clock System package.

Feature modules (time_entries, worktime, reports, requests, employees) with a
thin Flask controller layer over service/repository layers. The ``worktime``
package is the pure aggregation core shared by history, dashboard and reports.
"""
