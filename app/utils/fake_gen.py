from faker import Faker
from faker.providers import BaseProvider

class CmsProvider(BaseProvider):
    """
    CMS 专用数据生成器
    生成页面标题与区块内容
    """

    title_topics = [
        'Travel Notes', 'Kitchen Diary', 'Release Notes', 'Weekly Digest',
        'Field Report', 'Reading List', 'Studio Log', 'Garden Journal'
    ]

    def page_title(self):
        return f"{self.random_element(self.title_topics)}: {self.generator.catch_phrase()}"

    def header_text(self):
        return self.generator.sentence(nb_words=5).rstrip('.')

    def paragraph_text(self):
        return self.generator.paragraph(nb_sentences=4)

# 初始化 Faker 并添加自定义 Provider
fake = Faker('en_US')
fake.add_provider(CmsProvider)
