COMPLETED_STATUS = "COMPLETED"
CANCELED_STATUS = "CANCELED"

# Fixed predicate appended to every report except the KPIs
COMPLETED_ONLY = f"s.sale_status_desc = '{COMPLETED_STATUS}'"

REPORT_QUERIES = {
    "kpis": f"""
        SELECT
            COALESCE(SUM(CASE WHEN s.sale_status_desc = '{COMPLETED_STATUS}' THEN s.total_amount ELSE 0 END), 0) AS total_revenue,
            COALESCE(AVG(CASE WHEN s.sale_status_desc = '{COMPLETED_STATUS}' THEN s.total_amount END), 0) AS avg_ticket,
            COUNT(CASE WHEN s.sale_status_desc = '{COMPLETED_STATUS}' THEN 1 END) AS total_sales,
            COALESCE(
                SUM(CASE WHEN s.sale_status_desc = '{CANCELED_STATUS}' THEN 1 ELSE 0 END)::float
                / NULLIF(COUNT(s.id), 0),
            0) AS cancel_rate
        FROM sales s
        {{where_clause}}
    """,

    "revenue_over_time": """
        WITH all_days AS (
            SELECT generate_series(
                {start_date}::date,
                {end_date}::date,
                '1 day'::interval
            )::date AS date
        ),
        daily_revenue AS (
            SELECT
                DATE_TRUNC('day', s.created_at)::date AS date,
                SUM(s.total_amount) AS revenue
            FROM sales s
            {where_clause}
            GROUP BY 1
        )
        SELECT
            ad.date AS date,
            COALESCE(dr.revenue, 0) AS revenue
        FROM all_days ad
        LEFT JOIN daily_revenue dr ON ad.date = dr.date
        ORDER BY ad.date ASC
    """,

    "top_products": """
        SELECT
            p.id AS product_id,
            p.name AS name,
            SUM(ps.quantity) AS total_sold,
            SUM(ps.total_price) AS total_revenue
        FROM product_sales ps
        JOIN sales s ON s.id = ps.sale_id
        JOIN products p ON p.id = ps.product_id
        {where_clause}
        GROUP BY p.id, p.name
        ORDER BY total_revenue DESC, p.id ASC
        LIMIT {limit}
    """,

    "store_comparison": """
        SELECT
            st.id AS store_id,
            st.name AS name,
            SUM(s.total_amount) AS value
        FROM sales s
        JOIN stores st ON st.id = s.store_id
        {where_clause}
        GROUP BY st.id, st.name
        ORDER BY value DESC, st.id ASC
    """,

    "channels": """
        SELECT id, name
        FROM channels
        ORDER BY name ASC
    """,

    "stores": """
        SELECT id, name
        FROM stores
        ORDER BY name ASC
    """,
}

def build_query(template_name: str, **kwargs) -> str:
    """Build query from template"""
    template = REPORT_QUERIES.get(template_name)
    if not template:
        raise ValueError(f"Unknown query template: {template_name}")

    # Callers pass WhereClause.sql(), which is empty when nothing applies
    kwargs.setdefault('where_clause', '')
    return template.format(**kwargs)
