# /bmi_ussd/utils/metrics.py

from prometheus_client import Counter, Histogram, Gauge

# This file defines all Prometheus metrics used for application monitoring.
# Centralizing them here makes them easy to find and manage.

# Dialog Metrics
ussd_requests_counter = Counter('ussd_requests_total', 'USSD requests handled', ['outcome'])
transition_counter = Counter('ussd_transitions_total', 'Menu transitions', ['from_state', 'to_state'])
bmi_results_counter = Counter('bmi_results_total', 'BMI results computed', ['category'])
response_time_histogram = Histogram('response_time_seconds', 'Response time in seconds', ['endpoint'])

# Session Metrics
store_operations_counter = Counter('session_store_operations_total', 'Session store operations', ['operation', 'status'])
sessions_swept_counter = Counter('sessions_swept_total', 'Expired sessions removed by the sweep job')
active_sessions_gauge = Gauge('active_sessions', 'Sessions held by the in-memory store')
