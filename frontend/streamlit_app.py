import os
import streamlit as st
from myb.client import catalog
from myb.client import state as actions
from myb.client.api import ApiError, MybApi
from myb.client.state import Store

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:4000")
PUBLIC_BACKEND_URL = os.getenv("PUBLIC_BACKEND_URL", BACKEND_URL)
PLACEHOLDER_COVER = "https://via.placeholder.com/200x300?text=Book+Cover"

st.set_page_config(page_title="M.Y.B", layout="wide")

st.markdown(
    """
    <style>
    .block-container { padding-top: 1.2rem; padding-bottom: 1rem; }
    .book-meta { color: #98a2b3; font-size: 0.9rem; }
    .chapter-body { font-size: 1.08rem; line-height: 1.7; max-width: 46rem; }
    .dark .chapter-body { background: #1b2027; color: #f2f4f8; padding: 1rem; border-radius: 10px; }
    </style>
    """,
    unsafe_allow_html=True,
)

if "store" not in st.session_state:
    st.session_state["store"] = Store()
store: Store = st.session_state["store"]


def api() -> MybApi:
    return MybApi(BACKEND_URL, token=store.state.token)


def toast(message: str, kind: str = "success") -> None:
    st.toast(message, icon="✅" if kind == "success" else "⚠️")


def call(fn, *args, failure: str = "Request failed", **kwargs):
    try:
        return fn(*args, **kwargs)
    except ApiError as exc:
        toast(f"{failure}: {exc.message}", "error")
        return None


def refresh_books() -> None:
    books = call(api().books, failure="Could not load books")
    if books is not None:
        store.dispatch(actions.SET_BOOKS, books)


def refresh_reader_data() -> None:
    user = store.state.current_user
    if not user:
        return
    purchases = call(api().purchases, failure="Could not load purchases") or []
    store.dispatch(actions.SET_PURCHASES, catalog.purchased_book_ids(purchases, user["id"]))
    progress = call(api().progress, failure="Could not load reading progress") or []
    store.dispatch(actions.SET_PROGRESS, catalog.progress_by_book(progress, user["id"]))


def find_book(book_id: str) -> dict | None:
    return next((b for b in store.state.books if str(b["id"]) == str(book_id)), None)


def public_url(url: str) -> str:
    return url if url.startswith(("http", "data:")) else f"{PUBLIC_BACKEND_URL}{url}"


def cover(book: dict) -> str:
    return public_url(book.get("cover_url") or PLACEHOLDER_COVER)


def render_download(book: dict) -> None:
    st.markdown(f"[Download PDF]({public_url(book['pdf_url'])})")


def open_book(book_id: str) -> None:
    store.dispatch(actions.OPEN_BOOK, book_id)
    call(api().record_read, book_id, failure="Could not update views")
    st.session_state["next_page"] = "Book"


def render_book_card(book: dict, key: str) -> None:
    st.image(cover(book), use_container_width=True)
    st.markdown(f"**{book['title']}**")
    st.markdown(
        f"<div class='book-meta'>{book.get('author', '')} · {book.get('genre') or 'General'} · "
        f"{book.get('reads') or 0} reads · {book.get('likes') or 0} likes</div>",
        unsafe_allow_html=True,
    )
    if st.button("Open", key=f"{key}_{book['id']}"):
        open_book(book["id"])
        st.rerun()


def render_grid(books: list[dict], key: str, columns: int = 4) -> None:
    if not books:
        st.info("No books found. Try adjusting your filters.")
        return
    cols = st.columns(columns)
    for index, book in enumerate(books):
        with cols[index % columns]:
            render_book_card(book, key)


def render_home() -> None:
    books = catalog.visible_books(store.state.books, store.state.is_admin)
    st.title("M.Y.B")
    st.caption(f"{len(books)} books to read")
    st.subheader("Featured")
    render_grid(catalog.featured_books(books), "featured")
    st.subheader("Trending")
    render_grid(catalog.sort_books(books, "popular")[:8], "trending")


def render_catalog() -> None:
    st.title("Library")
    if not store.state.signed_in:
        st.info("Sign in to browse the library.")
        return
    books = catalog.visible_books(store.state.books, store.state.is_admin)
    cols = st.columns([2, 1, 1, 1])
    query = cols[0].text_input("Search", placeholder="Title, author or genre")
    genre = cols[1].selectbox("Genre", [""] + catalog.genres(books))
    status = cols[2].selectbox("Status", ["", "ongoing", "completed", "hiatus"])
    sort = cols[3].selectbox("Sort", catalog.SORT_KEYS)
    render_grid(catalog.sort_books(catalog.filter_books(books, genre, status, query), sort), "catalog")


def render_book() -> None:
    book = find_book(store.state.current_book_id) if store.state.current_book_id else None
    if not book:
        st.info("Pick a book from the library first.")
        return
    state = store.state
    left, right = st.columns([1, 2])
    with left:
        st.image(cover(book), use_container_width=True)
    with right:
        st.title(book["title"])
        st.markdown(f"by **{book.get('author', '')}** · ${float(book.get('price') or 0):.2f}")
        st.write(book.get("synopsis") or "")
        if book.get("tags"):
            st.caption(" ".join(f"#{tag}" for tag in book["tags"]))
        cols = st.columns(3)
        if cols[0].button("Read"):
            st.session_state["next_page"] = "Reader"
            st.rerun()
        if cols[1].button("Like"):
            if not state.signed_in:
                toast("Please sign in to like books", "error")
            elif call(api().like, book["id"], failure="Failed to like book"):
                toast("Added to favorites!")
                refresh_books()
        if str(book["id"]) in state.purchased_book_ids:
            cols[2].success("Purchased")
            if book.get("pdf_url"):
                render_download(book)
        elif cols[2].button("Buy"):
            store.dispatch(actions.ADD_TO_CART, str(book["id"]))
            st.session_state["checkout"] = True
    if st.session_state.get("checkout"):
        render_checkout(book)

    with st.expander("Report this book"):
        with st.form("content_report", clear_on_submit=True):
            reason = st.selectbox("Reason", ["copyright", "inappropriate", "spam", "other"])
            details = st.text_area("Details")
            if st.form_submit_button("Send report"):
                report = {"type": "content", "book_id": book["id"], "reason": reason, "message": details}
                if state.current_user:
                    report["user_id"] = state.current_user["id"]
                if call(api().report, report, failure="Could not send report"):
                    toast("Thanks, the report was sent")

    st.subheader("Comments")
    comments = catalog.comments_for_book(call(api().comments, failure="Could not load comments") or [], book["id"])
    for comment in comments:
        st.markdown(f"**{comment.get('user_name', 'anonymous')}**: {comment.get('comment', '')}")
    if state.is_admin:
        with st.form("comment_form", clear_on_submit=True):
            text = st.text_area("Add a comment")
            if st.form_submit_button("Post") and text.strip():
                if call(api().add_comment, book["id"], text, failure="Failed to post comment"):
                    toast("Comment posted")
                    st.rerun()


def render_checkout(book: dict) -> None:
    state = store.state
    if not state.current_user:
        toast("Please sign in to purchase books", "error")
        st.session_state["checkout"] = False
        return
    with st.form("payment_form"):
        st.markdown(f"### Complete your purchase · ${float(book.get('price') or 0):.2f}")
        method = st.radio("Payment method", ["credit_card", "paypal"], horizontal=True)
        st.text_input("Card number", placeholder="1234 5678 9012 3456")
        cols = st.columns(2)
        cols[0].text_input("Expiry", placeholder="MM/YY")
        cols[1].text_input("CVV", placeholder="123")
        if st.form_submit_button("Complete purchase"):
            purchase = call(
                api().purchase,
                state.current_user["id"],
                book["id"],
                float(book.get("price") or 0),
                method,
                failure="Payment failed",
            )
            if purchase:
                store.dispatch(actions.RECORD_PURCHASE, str(book["id"]))
                st.session_state["checkout"] = False
                toast("Purchase successful! You can now download the book.")
                st.rerun()


def render_reader() -> None:
    state = store.state
    book = find_book(state.current_book_id) if state.current_book_id else None
    if not book:
        st.info("Pick a book from the library first.")
        return
    chapters = catalog.chapters_for_book(call(api().chapters, failure="Could not load chapters") or [], book["id"])
    st.title(book["title"])
    if not chapters:
        st.info("No chapters published yet.")
        return
    numbers = [int(c.get("chapter_number") or 0) for c in chapters]
    current = state.current_chapter if state.current_chapter in numbers else numbers[0]
    chapter = chapters[numbers.index(current)]
    st.subheader(f"Chapter {current}: {chapter.get('title', '')}")
    st.markdown(
        "<div class='chapter-body'>"
        + "".join(f"<p>{p}</p>" for p in (chapter.get("content") or "").split("\n") if p.strip())
        + "</div>",
        unsafe_allow_html=True,
    )
    cols = st.columns(2)
    position = numbers.index(current)
    if position > 0 and cols[0].button("Previous chapter"):
        go_to_chapter(book, numbers[position - 1])
    if position < len(numbers) - 1 and cols[1].button("Next chapter"):
        go_to_chapter(book, numbers[position + 1])


def go_to_chapter(book: dict, number: int) -> None:
    store.dispatch(actions.SET_CHAPTER, number)
    user = store.state.current_user
    if user:
        existing = store.state.reading_progress.get(str(book["id"]))
        record = call(api().save_progress, user["id"], book["id"], number, existing, failure="Could not save progress")
        if record:
            store.dispatch(actions.RECORD_PROGRESS, {**record, "book_id": str(book["id"])})
    st.rerun()


def render_my_library() -> None:
    st.title("My Library")
    state = store.state
    if not state.current_user:
        st.info("Sign in to see your library.")
        return
    tabs = st.tabs(["Reading", "Purchased", "Cart"])
    with tabs[0]:
        reading = [find_book(book_id) for book_id in state.reading_progress]
        render_grid([b for b in reading if b], "reading")
    with tabs[1]:
        render_grid([b for b in (find_book(i) for i in state.purchased_book_ids) if b], "purchased")
        for book in catalog.downloadable_books(state.books, state.purchased_book_ids):
            st.markdown(f"**{book['title']}**")
            render_download(book)
    with tabs[2]:
        for book_id in state.cart:
            book = find_book(book_id)
            if book and st.button(f"Remove {book['title']}", key=f"cart_{book_id}"):
                store.dispatch(actions.REMOVE_FROM_CART, book_id)
                st.rerun()
        if state.cart and st.button("Clear cart"):
            store.dispatch(actions.CLEAR_CART)
            st.rerun()


def render_profile() -> None:
    st.title("Profile")
    state = store.state
    if state.signed_in:
        user = state.current_user or {}
        st.markdown(f"Signed in as **{user.get('username')}** ({state.role})")
        if user.get("joined_date"):
            st.caption(f"Member since {user['joined_date'][:10]}")
        if st.button("Sign out"):
            store.dispatch(actions.LOGOUT)
            toast("Signed out")
            st.rerun()
        return
    tabs = st.tabs(["Sign in", "Sign up", "Admin"])
    with tabs[0], st.form("signin"):
        email = st.text_input("Email")
        if st.form_submit_button("Sign in"):
            user = catalog.find_user_by_email(call(api().users, failure="Error signing in") or [], email)
            if user:
                store.dispatch(actions.LOGIN_USER, user)
                refresh_reader_data()
                toast("Welcome back!")
                st.rerun()
            else:
                toast("Invalid email or password", "error")
    with tabs[1], st.form("signup"):
        username = st.text_input("Username")
        email = st.text_input("Email", key="signup_email")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Create account"):
            user = call(api().sign_up, username, email, password, failure="Error creating account")
            if user:
                store.dispatch(actions.LOGIN_USER, user)
                toast("Account created successfully!")
                st.rerun()
    with tabs[2], st.form("admin_login"):
        username = st.text_input("Admin username")
        password = st.text_input("Admin password", type="password", key="admin_password")
        if st.form_submit_button("Sign in as admin"):
            client = api()
            data = call(client.login, username, password, failure="Admin sign-in failed")
            if data:
                store.dispatch(actions.LOGIN_ADMIN, data)
                refresh_books()
                toast("Signed in as admin")
                st.rerun()


def render_contact() -> None:
    st.title("Contact")
    user = store.state.current_user or {}
    with st.form("contact_form", clear_on_submit=True):
        name = st.text_input("Name", value=user.get("username", ""))
        email = st.text_input("Email", value=user.get("email", ""), key="contact_email")
        subject = st.text_input("Subject")
        message = st.text_area("Message")
        if st.form_submit_button("Send message"):
            if not message.strip():
                toast("Please write a message", "error")
            elif call(
                api().report,
                {"type": "contact", "name": name, "email": email, "subject": subject, "message": message},
                failure="Could not send message",
            ):
                toast("Message sent! We will get back to you soon.")


def render_admin() -> None:
    st.title("Admin")
    if not store.state.is_admin:
        st.info("Sign in as admin to manage books.")
        return
    client = api()
    books = list(store.state.books)
    labels = {"New book": None, **{f"{b['title']} ({b['id']})": b for b in books}}
    selected = labels[st.selectbox("Book", list(labels))]
    with st.form("book_form"):
        title = st.text_input("Title", value=(selected or {}).get("title", ""))
        author = st.text_input("Author", value=(selected or {}).get("author", ""))
        genre = st.text_input("Genre", value=(selected or {}).get("genre") or "")
        price = st.number_input("Price", min_value=0.0, value=float((selected or {}).get("price") or 0))
        synopsis = st.text_area("Synopsis", value=(selected or {}).get("synopsis", ""))
        tags = st.text_input("Tags (comma separated)", value=", ".join((selected or {}).get("tags", [])))
        published = st.checkbox("Published", value=bool((selected or {}).get("published")))
        featured = st.checkbox("Featured", value=bool((selected or {}).get("featured")))
        cover_file = st.file_uploader("Cover", type=["png", "jpg", "jpeg"])
        pdf_file = st.file_uploader("PDF", type=["pdf"])
        if st.form_submit_button("Save book"):
            payload = {
                "title": title,
                "author": author,
                "genre": genre or None,
                "price": price,
                "synopsis": synopsis,
                "tags": [t.strip() for t in tags.split(",") if t.strip()],
                "published": published,
                "featured": featured,
            }
            if cover_file:
                payload["cover_url"] = call(client.upload, cover_file.name, cover_file.getvalue(), failure="Cover upload failed")
            if pdf_file:
                payload["pdf_url"] = call(client.upload, pdf_file.name, pdf_file.getvalue(), failure="PDF upload failed")
            payload = {k: v for k, v in payload.items() if v is not None or k == "genre"}
            if selected:
                saved = call(client.update_book, selected["id"], payload, failure="Failed to save book")
            else:
                saved = call(client.create_book, payload, failure="Failed to save book")
            if saved:
                toast("Book updated" if selected else "Book created")
                refresh_books()
                st.rerun()
    if selected and st.button("Delete book"):
        if call(client.delete_book, selected["id"], failure="Failed to delete book"):
            toast("Book deleted")
            refresh_books()
            st.rerun()
    if selected:
        render_admin_chapters(client, selected)


def render_admin_chapters(client: MybApi, book: dict) -> None:
    st.subheader("Chapters")
    chapters = catalog.chapters_for_book(call(client.chapters, failure="Could not load chapters") or [], book["id"])
    for chapter in chapters:
        with st.expander(f"{chapter.get('chapter_number')}. {chapter.get('title', '')}"):
            with st.form(f"chapter_{chapter['id']}"):
                title = st.text_input("Title", value=chapter.get("title", ""))
                content = st.text_area("Content", value=chapter.get("content", ""), height=240)
                if st.form_submit_button("Save chapter"):
                    if call(client.update_chapter, chapter["id"], {"title": title, "content": content}, failure="Failed to save chapter"):
                        toast("Chapter saved")
            if st.button("Delete chapter", key=f"delete_chapter_{chapter['id']}"):
                if call(client.delete_chapter, chapter["id"], failure="Failed to delete chapter"):
                    toast("Chapter deleted")
                    st.rerun()
    with st.form("new_chapter", clear_on_submit=True):
        next_number = max([int(c.get("chapter_number") or 0) for c in chapters], default=0) + 1
        number = st.number_input("Chapter number", min_value=0, value=next_number, step=1)
        title = st.text_input("Chapter title")
        content = st.text_area("Chapter content", height=240)
        if st.form_submit_button("Add chapter"):
            payload = {"book_id": book["id"], "chapter_number": int(number), "title": title, "content": content}
            if call(client.create_chapter, payload, failure="Failed to add chapter"):
                toast("Chapter added")
                st.rerun()


PAGES = {
    "Home": render_home,
    "Library": render_catalog,
    "Book": render_book,
    "Reader": render_reader,
    "My Library": render_my_library,
    "Profile": render_profile,
    "Contact": render_contact,
    "Admin": render_admin,
}

if not store.state.books:
    refresh_books()

st.sidebar.title("M.Y.B")
if st.sidebar.toggle("Dark mode", value=store.state.dark_mode) != store.state.dark_mode:
    store.dispatch(actions.TOGGLE_THEME)
if st.sidebar.button("Refresh"):
    refresh_books()
    refresh_reader_data()
if "next_page" in st.session_state:
    st.session_state["page"] = st.session_state.pop("next_page")
page = st.sidebar.radio("Go to", list(PAGES), key="page")
if store.state.dark_mode:
    st.markdown("<div class='dark'></div>", unsafe_allow_html=True)
PAGES[page]()
