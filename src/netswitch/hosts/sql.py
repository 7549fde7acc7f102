# netswitch/hosts/sql.py
"""
Multisite host backed by the WordPress database.

Reads the global multisite tables (``site``, ``blogs``, ``sitemeta``,
``users``, ``usermeta``) and the per-site ``options``/``posts`` tables
through async SQLAlchemy Core. Read-only.
"""
from __future__ import annotations

import logging
import re
from typing import Any

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from netswitch.contracts.host import HostEnvironment, MultisiteHost
from netswitch.contracts.models import Network, Site
from netswitch.core.config import Settings

logger = logging.getLogger(__name__)

_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
_SERIALIZED_STRING = re.compile(r's:\d+:"(.*?)";', re.DOTALL)

# Capabilities only super admins hold.
NETWORK_CAPABILITIES = frozenset(
    {
        "manage_network",
        "manage_sites",
        "manage_network_users",
        "manage_network_plugins",
        "manage_network_themes",
        "manage_network_options",
        "create_sites",
        "delete_sites",
    }
)


def serialized_strings(value: str | None) -> list[str]:
    """String tokens of a PHP-serialized array, in order.

    Enough for ``site_admins`` (list of logins) and ``*_capabilities``
    (role/capability keys mapped to booleans). Only the keys come back:
    roles are not expanded into the capabilities they grant, and a key
    mapped to ``false`` is still returned.
    """
    if not value:
        return []
    return _SERIALIZED_STRING.findall(value)


class WordPressSchema:
    """Table definitions for one ``$table_prefix``."""

    def __init__(self, prefix: str = "wp_") -> None:
        if not _PREFIX_PATTERN.match(prefix):
            raise ValueError(f"Invalid table prefix '{prefix}'")
        self.prefix = prefix
        self.metadata = MetaData()

        self.site = Table(
            f"{prefix}site",
            self.metadata,
            Column("id", Integer, primary_key=True),
            Column("domain", String(200), nullable=False),
            Column("path", String(100), nullable=False),
        )
        self.blogs = Table(
            f"{prefix}blogs",
            self.metadata,
            Column("blog_id", Integer, primary_key=True),
            Column("site_id", Integer, nullable=False, index=True),
            Column("domain", String(200), nullable=False),
            Column("path", String(100), nullable=False),
        )
        self.sitemeta = Table(
            f"{prefix}sitemeta",
            self.metadata,
            Column("meta_id", Integer, primary_key=True),
            Column("site_id", Integer, nullable=False, index=True),
            Column("meta_key", String(255)),
            Column("meta_value", Text),
        )
        self.users = Table(
            f"{prefix}users",
            self.metadata,
            Column("ID", Integer, primary_key=True),
            Column("user_login", String(60), nullable=False),
        )
        self.usermeta = Table(
            f"{prefix}usermeta",
            self.metadata,
            Column("umeta_id", Integer, primary_key=True),
            Column("user_id", Integer, nullable=False, index=True),
            Column("meta_key", String(255)),
            Column("meta_value", Text),
        )

    def blog_prefix(self, blog_id: int) -> str:
        # The main site keeps the bare prefix.
        return self.prefix if blog_id == 1 else f"{self.prefix}{int(blog_id)}_"

    def options(self, blog_id: int) -> Table:
        return Table(
            f"{self.blog_prefix(blog_id)}options",
            self.metadata,
            Column("option_id", Integer, primary_key=True),
            Column("option_name", String(191), nullable=False, unique=True),
            Column("option_value", Text, nullable=False),
            keep_existing=True,
        )

    def posts(self, blog_id: int) -> Table:
        return Table(
            f"{self.blog_prefix(blog_id)}posts",
            self.metadata,
            Column("ID", Integer, primary_key=True),
            Column("guid", String(255), nullable=False, default=""),
            Column("post_type", String(20), nullable=False, default="post"),
            keep_existing=True,
        )


class SqlMultisiteHost(MultisiteHost):
    def __init__(
        self,
        engine: AsyncEngine,
        *,
        schema: WordPressSchema | None = None,
        main_network_id: int = 1,
        version: str = "6.8",
    ) -> None:
        self._engine = engine
        self.schema = schema or WordPressSchema()
        self.main_network_id = main_network_id
        self.version = version

    async def _scalar(self, stmt: Any) -> Any:
        async with self._engine.connect() as conn:
            return (await conn.execute(stmt)).scalar()

    async def _rows(self, stmt: Any) -> list[Any]:
        async with self._engine.connect() as conn:
            return list((await conn.execute(stmt)).all())

    async def environment(self) -> HostEnvironment:
        s = self.schema
        try:
            networks = await self._scalar(select(func.count()).select_from(s.site))
            await self._scalar(select(func.count()).select_from(s.blogs))
        except SQLAlchemyError as exc:
            logger.warning("Multisite tables not readable: %s", exc)
            return HostEnvironment(multisite=False, multi_network=False, version=self.version)
        return HostEnvironment(
            multisite=True,
            multi_network=bool(networks),
            version=self.version,
        )

    # -- networks ------------------------------------------------------------

    @staticmethod
    def _network(row: Any) -> Network:
        return Network(id=int(row.id), domain=row.domain, path=row.path)

    async def get_networks(
        self, *, number: int = 100, orderby: str = "domain"
    ) -> list[Network]:
        site = self.schema.site
        order = (site.c.domain, site.c.id) if orderby == "domain" else (site.c.id,)
        rows = await self._rows(select(site).order_by(*order).limit(number))
        return [self._network(r) for r in rows]

    async def get_network(self, network_id: int) -> Network | None:
        site = self.schema.site
        rows = await self._rows(select(site).where(site.c.id == network_id))
        return self._network(rows[0]) if rows else None

    async def get_network_by_path(self, domain: str, path: str = "/") -> Network | None:
        site = self.schema.site
        rows = await self._rows(select(site).where(func.lower(site.c.domain) == domain.lower()))
        candidates = [self._network(r) for r in rows if path.startswith(r.path)]
        if not candidates:
            return None
        return max(candidates, key=lambda n: len(n.path))

    async def get_network_option(
        self, network_id: int, key: str, default: Any = None
    ) -> Any:
        meta = self.schema.sitemeta
        rows = await self._rows(
            select(meta.c.meta_value)
            .where(meta.c.site_id == network_id, meta.c.meta_key == key)
            .limit(1)
        )
        return rows[0].meta_value if rows else default

    # -- sites ---------------------------------------------------------------

    async def count_sites(self, network_id: int, *, limit: int = 1000) -> int:
        blogs = self.schema.blogs
        capped = (
            select(blogs.c.blog_id).where(blogs.c.site_id == network_id).limit(limit).subquery()
        )
        return int(await self._scalar(select(func.count()).select_from(capped)) or 0)

    async def get_sites(self, network_id: int, *, number: int = 100) -> list[Site]:
        blogs = self.schema.blogs
        rows = await self._rows(
            select(blogs)
            .where(blogs.c.site_id == network_id)
            .order_by(blogs.c.blog_id)
            .limit(number)
        )
        return [
            Site(blog_id=int(r.blog_id), network_id=int(r.site_id), domain=r.domain, path=r.path)
            for r in rows
        ]

    async def _blog_option(self, blog_id: int, name: str) -> str | None:
        options = self.schema.options(blog_id)
        try:
            rows = await self._rows(
                select(options.c.option_value).where(options.c.option_name == name)
            )
        except SQLAlchemyError as exc:
            logger.debug("Options of blog %d unreadable: %s", blog_id, exc)
            return None
        return rows[0].option_value if rows else None

    async def get_site_url(self, blog_id: int) -> str | None:
        return await self._blog_option(blog_id, "siteurl")

    async def get_site_icon_url(self, blog_id: int) -> str | None:
        raw = await self._blog_option(blog_id, "site_icon")
        if not raw or not str(raw).isdigit() or int(raw) <= 0:
            return None

        posts = self.schema.posts(blog_id)
        try:
            rows = await self._rows(select(posts.c.guid).where(posts.c.ID == int(raw)))
        except SQLAlchemyError as exc:
            logger.debug("Posts of blog %d unreadable: %s", blog_id, exc)
            return None
        return rows[0].guid if rows and rows[0].guid else None

    async def get_theme_favicon_url(self, blog_id: int) -> str | None:
        stylesheet = await self._blog_option(blog_id, "stylesheet")
        siteurl = await self.get_site_url(blog_id)
        if not stylesheet or not siteurl:
            return None
        return f"{siteurl.rstrip('/')}/wp-content/themes/{stylesheet}/favicon.ico"

    # -- users ---------------------------------------------------------------

    async def _login(self, user_id: int) -> str | None:
        users = self.schema.users
        rows = await self._rows(select(users.c.user_login).where(users.c.ID == user_id))
        return rows[0].user_login if rows else None

    async def _super_admin_logins(self) -> list[str]:
        raw = await self.get_network_option(self.main_network_id, "site_admins")
        return serialized_strings(raw)

    async def user_exists(self, user_id: int) -> bool:
        return await self._login(user_id) is not None

    async def is_super_admin(self, user_id: int) -> bool:
        login = await self._login(user_id)
        return login is not None and login in await self._super_admin_logins()

    async def user_can(self, user_id: int, capability: str) -> bool:
        """Super admins hold everything; network capabilities belong to them only.

        Otherwise ``capability`` must appear as a key of the main site's
        ``<prefix>capabilities`` meta: a directly granted capability or a role name.
        Role definitions in ``<prefix>user_roles`` are not consulted.
        """
        if await self.is_super_admin(user_id):
            return True
        if capability in NETWORK_CAPABILITIES:
            return False
        caps = await self.get_user_meta(user_id, f"{self.schema.prefix}capabilities")
        return capability in serialized_strings(caps)

    async def is_user_member_of_blog(self, user_id: int, blog_id: int) -> bool:
        key = f"{self.schema.blog_prefix(blog_id)}capabilities"
        return bool(serialized_strings(await self.get_user_meta(user_id, key)))

    async def get_user_meta(self, user_id: int, key: str) -> str | None:
        meta = self.schema.usermeta
        rows = await self._rows(
            select(meta.c.meta_value)
            .where(meta.c.user_id == user_id, meta.c.meta_key == key)
            .order_by(meta.c.umeta_id)
            .limit(1)
        )
        return rows[0].meta_value if rows else None

    async def count_super_admins(self) -> int:
        return len(await self._super_admin_logins())

    async def close(self) -> None:
        await self._engine.dispose()


def create_sql_host(settings: Settings) -> SqlMultisiteHost:
    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if not settings.database_url.startswith("sqlite"):
        kwargs["pool_size"] = settings.database_pool_size
    logger.info("Creating async DB engine for WordPress host")
    engine = create_async_engine(settings.database_url, **kwargs)
    return SqlMultisiteHost(
        engine,
        schema=WordPressSchema(settings.table_prefix),
        main_network_id=settings.default_network_id,
        version=settings.host_version,
    )
