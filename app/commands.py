import click
import random
from datetime import date, timedelta
from flask import current_app
from flask.cli import with_appcontext
from app.extensions import db
from app.models.auth import User
from app.models.content import Page, Block, STATUS_DRAFT, STATUS_PROGRAMMED, STATUS_PUBLISHED
from app.models.sys import AppConfig
from app.services.config_service import ConfigService
from app.services.user_service import UserService
from app.exceptions import ValidationFailure
from app.utils.file_helper import list_images
from app.utils.fake_gen import fake

DEMO_PASSWORD = 'password'


@click.command('status')
@with_appcontext
def status():
    """
    [验证指令] 查看当前数据库中的数据统计。
    """
    click.echo(click.style('CMS 数据库状态:', fg='cyan', bold=True))

    try:
        u_count = User.query.count()
        p_count = Page.query.count()
        b_count = Block.query.count()
        pages = Page.query.all()
        by_status = {s: 0 for s in (STATUS_DRAFT, STATUS_PROGRAMMED, STATUS_PUBLISHED)}
        for page in pages:
            by_status[page.status] += 1
        config_row = AppConfig.query.first()

        click.echo(f" - 站点名称 (App name): \t{config_row.app_name if config_row else '-'}")
        click.echo(f" - 用户 (Users): \t{u_count}")
        click.echo(f" - 页面 (Pages): \t{p_count}")
        for name, count in by_status.items():
            click.echo(f"     {name}: \t{count}")
        click.echo(f" - 区块 (Blocks): \t{b_count}")

        if u_count > 0:
            click.echo(click.style('✔ 数据库连接正常，数据已存在。', fg='green'))
        else:
            click.echo(click.style('⚠ 数据库为空，请运行 flask forge 生成数据。', fg='yellow'))

    except Exception as e:
        click.echo(click.style(f'✘ 数据库读取失败: {str(e)}', fg='red'))
        click.echo("请检查是否执行了 'flask db upgrade'")


@click.command('forge')
@click.option('--pages', default=3, help='每个用户生成的页面数 (默认3)')
@with_appcontext
def forge(pages):
    """
    [造物主指令] 重建数据库并填充演示用户与页面。
    警告：这将清除数据库中的现有数据！
    """
    click.echo(click.style('⚡ 初始化 CMS 演示数据...', fg='cyan', bold=True))

    # 1. 清除旧数据
    db.drop_all()
    db.create_all()

    # 2. 站点配置
    ConfigService.ensure_initialized(current_app.config['APP_NAME'])

    # 3. 用户
    click.echo('正在创建用户...')
    users = init_users()

    # 4. 页面
    click.echo('正在生成页面...')
    init_pages(users, pages)

    click.echo(click.style('✔ CMS 数据构建完成！', fg='green', bold=True))
    click.echo(f"管理员账号: admin@cms.com / 密码: {DEMO_PASSWORD}")
    click.echo(f"数据统计: {len(users)}用户, {Page.query.count()}页面")


@click.command('create-user')
@click.option('--email', prompt=True)
@click.option('--username', prompt=True)
@click.option('--name', prompt=True)
@click.option('--role', type=click.Choice([User.ROLE_USER, User.ROLE_ADMIN]), default=User.ROLE_USER)
@click.password_option()
@with_appcontext
def create_user(email, username, name, role, password):
    """新增一个用户"""
    try:
        user = UserService.create_user(email, username, name, password, role)
    except ValidationFailure as e:
        raise click.ClickException(e.message)
    click.echo(click.style(f'✔ 用户已创建: {user.username} ({user.role})', fg='green'))


def init_users():
    """管理员 + 三个普通作者"""
    users = [User(email='admin@cms.com', username='admin', name='Site Admin',
                  password=DEMO_PASSWORD, role=User.ROLE_ADMIN)]
    for _ in range(3):
        profile = fake.simple_profile()
        users.append(User(
            email=profile['mail'],
            username=profile['username'],
            name=profile['name'],
            password=DEMO_PASSWORD,
            role=User.ROLE_USER,
        ))
    db.session.add_all(users)
    db.session.commit()
    return users


def init_pages(users, per_user):
    """每个用户轮流生成草稿 / 排期 / 已发布页面"""
    today = date.today()
    images = list_images()
    statuses = [STATUS_DRAFT, STATUS_PROGRAMMED, STATUS_PUBLISHED]

    for user in users:
        for i in range(per_user):
            kind = statuses[i % len(statuses)]
            creation_date = today - timedelta(days=random.randint(10, 60))
            if kind == STATUS_DRAFT:
                publication_date = None
            elif kind == STATUS_PROGRAMMED:
                publication_date = today + timedelta(days=random.randint(1, 30))
            else:
                publication_date = creation_date + timedelta(days=random.randint(0, 9))

            page = Page(title=fake.page_title(), author=user,
                        creation_date=creation_date, publication_date=publication_date)
            db.session.add(page)

            contents = [(Block.TYPE_HEADER, fake.header_text())]
            for _ in range(random.randint(1, 3)):
                contents.append((Block.TYPE_PARAGRAPH, fake.paragraph_text()))
            if images:
                contents.append((Block.TYPE_IMAGE, random.choice(images)))
            for position, (block_type, content) in enumerate(contents, start=1):
                page.blocks.append(Block(type=block_type, content=content, position=position))
    db.session.commit()
