"""
Status homepage served at GET /.
"""

from jinja2 import Environment

from services import ServiceStatus

HTML_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <title>AI Vending Machine</title>
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <style>
        body { font-family: system-ui, -apple-system, sans-serif; max-width: 900px; margin: 0 auto; padding: 20px; background: #f8f9fa; }
        header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 2rem; border-radius: 12px; margin-bottom: 2rem; }
        h1 { margin: 0; font-size: 2.5rem; }
        .subtitle { opacity: 0.9; margin-top: 0.5rem; }
        .status-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(250px, 1fr)); gap: 1rem; margin: 2rem 0; }
        .status-card { background: white; padding: 1.5rem; border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); }
        .status-card.good { border-left: 4px solid #10b981; }
        .status-card.pending { border-left: 4px solid #f59e0b; }
        .endpoint { background: white; padding: 1.5rem; margin: 1rem 0; border-radius: 8px; border: 1px solid #e5e7eb; }
        code { background: #1f2937; color: #f3f4f6; padding: 0.2rem 0.4rem; border-radius: 4px; font-family: 'Courier New', monospace; }
        .badge { display: inline-block; padding: 0.25rem 0.75rem; border-radius: 9999px; font-size: 0.875rem; font-weight: 600; }
        .badge.success { background: #d1fae5; color: #065f46; }
        .badge.pending { background: #fef3c7; color: #92400e; }
        .url-box { background: #1f2937; color: white; padding: 1rem; border-radius: 6px; font-family: monospace; word-break: break-all; margin: 1rem 0; }
    </style>
</head>
<body>
    <header>
        <h1>AI Vending Machine API</h1>
        <div class="subtitle">Gateway-Based Micropayments</div>
    </header>

    <div class="status-grid">
        <div class="status-card {{ 'good' if status.ai_connected else 'pending' }}">
            <h3>Gemini AI</h3>
            <div class="badge {{ 'success' if status.ai_connected else 'pending' }}">{{ 'CONNECTED' if status.ai_connected else 'PENDING' }}</div>
            <p>Model: {{ model }}</p>
        </div>

        <div class="status-card {{ 'good' if status.payment_ready else 'pending' }}">
            <h3>x402 Payments</h3>
            <div class="badge {{ 'success' if status.payment_ready else 'pending' }}">{{ 'READY' if status.payment_ready else 'AWAITING CREDENTIALS' }}</div>
            <p>{{ 'Facilitator initialized' if status.payment_ready else 'Insert THIRDWEB_SECRET_KEY in Secrets' }}</p>
        </div>

        <div class="status-card {{ 'good' if status.wallet_ready else 'pending' }}">
            <h3>Circle Wallets</h3>
            <div class="badge {{ 'success' if status.wallet_ready else 'pending' }}">{{ 'READY' if status.wallet_ready else 'AWAITING CREDENTIALS' }}</div>
            <p>{{ 'Client initialized' if status.wallet_ready else 'Insert CIRCLE_API_KEY in Secrets' }}</p>
        </div>
    </div>

    <div class="endpoint">
        <h2>Free Test Endpoint</h2>
        <p><strong>POST</strong> <code>/api/ask-free</code></p>
        <p>Test the AI integration without payment. Send a JSON body with a "question" field.</p>
        <p><em>Example:</em> <code>{"question": "Explain agentic commerce"}</code></p>
    </div>

    <div class="endpoint">
        <h2>Paid Endpoint</h2>
        <p><strong>POST</strong> <code>/api/ask-paid</code></p>
        <p>Requires x402 micropayment. Current status: <strong>{{ 'Ready for payments' if status.payment_ready else 'Awaiting credentials' }}</strong></p>
        <p>When credentials are added, this endpoint will verify x402 payments and return AI responses.</p>
    </div>

    <div class="endpoint">
        <h2>Developer Tools</h2>
        <p><strong>GET</strong> <code>/health</code> - System status (JSON)</p>
        <p><strong>GET</strong> <code>/</code> - This documentation page</p>
    </div>

    <div class="url-box">
        <strong>Your Live URL:</strong><br>
        {{ base_url }}
    </div>
</body>
</html>
"""

_environment = Environment(autoescape=True)
_template = _environment.from_string(HTML_TEMPLATE)


def render_homepage(status: ServiceStatus, model: str, base_url: str) -> str:
    return _template.render(status=status, model=model, base_url=base_url)
