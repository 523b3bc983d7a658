from __future__ import annotations

from collections import Counter, defaultdict

from . import common


class DashboardService:
    """Aggregations for the admin dashboard."""

    @staticmethod
    def summary():
        store = common._store()
        today = common._today().isoformat()
        today_total = sum(float(b.get("total_bill_amount") or 0)
                          for b in store.bookings.values() if b.get("start_date") == today)
        return {
            "today_total_amount": round(today_total, 2),
            "total_bookings": len(store.bookings),
            "total_customers": len(store.customers),
        }

    @staticmethod
    def analytics():
        store = common._store()
        bookings = list(store.bookings.values())

        revenue = round(sum(float(b.get("total_bill_amount") or 0) for b in bookings), 2)

        # Bookings per car
        cnt = Counter(b.get("car_id") for b in bookings)
        bookings_by_car = []
        for cid, c in store.cars.items():
            label = f"{c.get('brand', '')} {c.get('model', '')}".strip()
            bookings_by_car.append({
                "car_id": cid,
                "label": label or c.get("reg_no") or cid[:6],
                "count": cnt.get(cid, 0),
            })
        bookings_by_car.sort(key=lambda x: x["count"], reverse=True)

        # Revenue by date (group by booking start_date)
        rev_by_date = defaultdict(float)
        for b in bookings:
            d = b.get("start_date")
            if not d:
                continue
            rev_by_date[d] += float(b.get("total_bill_amount") or 0)
        revenue_by_date = [{"date": k, "total": round(v, 2)} for k, v in sorted(rev_by_date.items())]

        role_cnt = Counter(u.get("role", "") for u in store.users.values())
        users_by_role = [{"role": k or "unknown", "count": v} for k, v in role_cnt.items()]

        return {
            "totals": {
                "users": len(store.users),
                "customers": len(store.customers),
                "cars": len(store.cars),
                "bookings": len(bookings),
                "revenue": revenue,
            },
            "bookings_by_car": bookings_by_car,
            "revenue_by_date": revenue_by_date,
            "users_by_role": users_by_role,
        }
