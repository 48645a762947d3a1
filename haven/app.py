import time

import pandas as pd
import streamlit as st

from haven.actions import MarketplaceActions
from haven.auth.credentials import get_credentials_provider
from haven.auth.session import SessionStateProvider
from haven.config import get_config
from haven.data.catalog import CatalogQuery, ProfileQuery
from haven.data.models import FilterSelection, PriceBracket
from haven.data.util import get_data_access

st.set_page_config(page_title="Handcrafted Haven Catalog", layout="wide")

# -----------------------------------------------------------------------------
# Backend selection from config (DATA_BACKEND=csv|sql)
# -----------------------------------------------------------------------------
config = get_config()
da = get_data_access()
catalog = CatalogQuery(da)
profiles = ProfileQuery(da)
session = SessionStateProvider(st.session_state, get_credentials_provider(da))

# -----------------------------------------------------------------------------
# Sidebar: account
# -----------------------------------------------------------------------------
user = session.current_user()
if user is None:
    with st.sidebar.form("sign_in"):
        st.markdown("#### Sign in")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Sign in"):
            if session.sign_in(email, password) is None:
                st.error("Invalid credentials.")
            else:
                st.rerun()
else:
    st.sidebar.markdown(f"Signed in as **{user.firstname}** ({user.user_type})")
    if st.sidebar.button("Sign out"):
        session.sign_out()
        st.rerun()

# -----------------------------------------------------------------------------
# Sidebar filters (choices sourced via the DataAccess layer, defaults from the URL)
# -----------------------------------------------------------------------------
st.sidebar.header("Filters")
initial = FilterSelection.from_search_params(st.query_params)

cat_options = ["(All)"] + profiles.categories().values
cat_sel = st.sidebar.selectbox(
    "Category", cat_options,
    index=cat_options.index(initial.category) if initial.category in cat_options else 0,
)

sellers = profiles.sellers()
seller_labels = {"(All)": None}
seller_labels.update({f"{s.firstname} {s.lastname}".strip(): s.user_id for s in sellers})
seller_ids = list(seller_labels.values())
seller_sel = st.sidebar.selectbox(
    "Seller", list(seller_labels),
    index=seller_ids.index(initial.seller_id) if initial.seller_id in seller_ids else 0,
)

price_labels = {
    "Any price": None,
    "Under $15": PriceBracket.UNDER_15,
    "$15 to $30": PriceBracket.FROM_15_TO_30,
    "Above $30": PriceBracket.ABOVE_30,
}
price_brackets = list(price_labels.values())
price_sel = st.sidebar.radio("Price", list(price_labels), index=price_brackets.index(initial.price_bracket))

page_size = st.sidebar.number_input(
    "Products per page",
    min_value=config.min_page_size,
    max_value=config.max_page_size,
    value=config.catalog_page_size,
    step=1,
)

selection = FilterSelection(
    category=None if cat_sel == "(All)" else cat_sel,
    seller_id=seller_labels[seller_sel],
    price_bracket=price_labels[price_sel],
)

# -----------------------------------------------------------------------------
# Queries via the interface (each interaction triggers fresh calls)
# -----------------------------------------------------------------------------
total = catalog.count(selection)
pages = max(1, -(-total // int(page_size)))
page_number = st.sidebar.number_input("Page", min_value=1, max_value=pages, value=1, step=1)

t0 = time.perf_counter()
result = catalog.page(selection, page_size=int(page_size), page_number=int(page_number))
t_page = (time.perf_counter() - t0) * 1000.0

# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------
c1, c2 = st.columns(2)
c1.metric("Matching products", f"{result.total_count:,}")
c2.metric("Page", f"{result.page} / {max(result.pages, 1)}")

with st.expander("Query timings (ms)"):
    st.write({"catalog.page": round(t_page, 2)})

st.markdown("### Products")
if not result.items:
    st.info("No products match these filters.")
cols = st.columns(3)
for i, item in enumerate(result.items):
    with cols[i % 3]:
        if item.image:
            st.image(item.image, use_container_width=True)
        st.markdown(f"**{item.name}**  \n${item.price:,.2f}")
        seller_category = item.seller.profile.category if item.seller.profile else "no profile"
        st.caption(f"{item.seller.display_name} · {seller_category}")

# -----------------------------------------------------------------------------
# Product detail
# -----------------------------------------------------------------------------
if result.items:
    st.markdown("### Product detail")
    names = {item.name: item.product_id for item in result.items}
    chosen = catalog.product(names[st.selectbox("Product", list(names))])
    if chosen is not None:
        stats = profiles.stats(chosen.product_id)
        st.markdown(f"**{chosen.name}**: {chosen.description}")
        st.markdown(f"Rating {stats.average_rating} ({stats.review_count} reviews)")
        reviews = profiles.reviews(chosen.product_id)
        if reviews:
            st.dataframe(
                pd.DataFrame(
                    {
                        "reviewer": [f"{r.user.firstname} {r.user.lastname}" if r.user else "" for r in reviews],
                        "rating": [r.rating for r in reviews],
                        "review": [r.review for r in reviews],
                        "created_at": [r.created_at for r in reviews],
                    }
                ),
                use_container_width=True,
            )

        # Writes need a read/write store
        if user is not None and config.data_backend == "sql":
            actions = MarketplaceActions(da, session)
            with st.form("review"):
                rating = st.slider("Rating", 1, 5, 5)
                text = st.text_area("Review")
                if st.form_submit_button("Submit review"):
                    outcome = actions.post_new_review(
                        {"user_id": user.id, "product_id": chosen.product_id, "rating": rating, "review": text}
                    )
                    if outcome.success:
                        st.success(outcome.message)
                    else:
                        for messages in outcome.errors.values():
                            for message in messages:
                                st.error(message)
                        if outcome.message:
                            st.error(outcome.message)
