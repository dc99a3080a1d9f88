import os
from flask import current_app


def get_file_extension(filename):
    """从文件名获取扩展名"""
    if not filename or '.' not in filename:
        return None
    return filename.rsplit('.', 1)[1].lower()


def is_image(filename):
    """检查扩展名是否属于允许的图片类型"""
    return get_file_extension(filename) in current_app.config['IMAGE_EXTENSIONS']


def list_images():
    """
    图片库中的所有图片文件名 (按名称排序)
    图片块只保存这里返回的裸文件名
    """
    folder = current_app.config['IMAGES_FOLDER']
    if not os.path.isdir(folder):
        current_app.logger.warning(f'图片目录不存在: {folder}')
        return []
    return sorted(
        name for name in os.listdir(folder)
        if os.path.isfile(os.path.join(folder, name)) and is_image(name)
    )
