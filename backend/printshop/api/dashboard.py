from fastapi import APIRouter, HTTPException, Request
from typing import Any, Dict
from printshop.db.session import get_session
from printshop.db.store import RecordStore, SettingsStore
from printshop.models.filament import Filament
from printshop.models.part import Part
from printshop.models.product import Product
from printshop.services import products as catalog
from printshop.services.aggregation import summarize_products
from printshop.services.inventory import is_filament_below_threshold, is_part_below_threshold
import logging
from starlette.responses import HTMLResponse

logger = logging.getLogger(__name__)
router = APIRouter()


def _render_summary_html(summary: Dict[str, Any]) -> str:
    return f"""
<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>Shop Summary</title>
  <style>
    body {{ font-family: Inter, system-ui, -apple-system, 'Segoe UI', Roboto, 'Helvetica Neue', Arial; background:#f3f4f6; padding:24px; }}
    .container {{ max-width:1100px; margin:0 auto; }}
    .cards {{ display:flex; flex-wrap:wrap; gap:16px; margin-bottom:20px; }}
    .card {{ background:white;padding:20px;border-radius:8px; box-shadow:0 1px 3px rgba(0,0,0,0.06); flex:1; min-width:180px }}
    .title {{ color:#6b7280; font-size:13px }}
    .value {{ font-size:28px; font-weight:700; margin-top:6px }}
  </style>
</head>
<body>
  <div class="container">
    <h1>Shop Summary</h1>
    <div class="cards">
      <div class="card"><div class="title">Products</div><div class="value">{summary['product_count']}</div></div>
      <div class="card"><div class="title">Avg Profit Margin</div><div class="value">{summary['average_profit_margin']:.2f}%</div></div>
      <div class="card"><div class="title">Avg Markup</div><div class="value">{summary['average_markup']:.2f}%</div></div>
      <div class="card"><div class="title">Filaments In Use</div><div class="value">{summary['unique_filament_count']}</div></div>
      <div class="card"><div class="title">Ad Budget</div><div class="value">${summary['total_advertising_budget']:.2f}</div></div>
    </div>
    <div class="cards">
      <div class="card"><div class="title">Low Filaments</div><div class="value">{summary['low_stock_filaments']}</div></div>
      <div class="card"><div class="title">Low Parts</div><div class="value">{summary['low_stock_parts']}</div></div>
      <div class="card"><div class="title">Unpriceable Products</div><div class="value">{summary['unpriceable_products']}</div></div>
    </div>
  </div>
</body>
</html>
"""


@router.get("/summary")
def summary(request: Request) -> Any:
    session = get_session()
    try:
        products = RecordStore(session, Product).list(Product.id)
        usage = catalog.load_filament_usage(session, [p.id for p in products])
        settings = SettingsStore(session).get()
        rows = []
        for product in products:
            product_rows = usage[product.id]
            rows.append((
                product,
                [filament for filament, _ in product_rows],
                catalog.price_product(product, product_rows, settings),
            ))
        result = summarize_products(rows)
        result["low_stock_filaments"] = sum(
            1 for f in RecordStore(session, Filament).list() if is_filament_below_threshold(f)
        )
        result["low_stock_parts"] = sum(
            1 for p in RecordStore(session, Part).list() if is_part_below_threshold(p)
        )

        accept = request.headers.get('accept', '')
        if 'text/html' in accept:
            return HTMLResponse(content=_render_summary_html(result))

        return result
    except Exception as e:
        logger.exception("Failed to compute summary: %s", e)
        raise HTTPException(status_code=500, detail="Failed to compute shop summary")
    finally:
        session.close()
