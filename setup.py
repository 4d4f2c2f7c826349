from setuptools import find_packages, setup

package_name = 'sparkplug_client'

setup(
    name=package_name,
    version='0.0.0',
    packages=find_packages(exclude=['test', 'test.*']),
    package_data={package_name: ['config/config.yaml']},
    python_requires='>=3.11',
    install_requires=[
        'setuptools',
        'paho-mqtt[proxy]>=2.0',
        'PySocks',
        'pyyaml',
    ],
    zip_safe=True,
    maintainer='hansoo',
    maintainer_email='hansoo@todo.todo',
    description='Sparkplug broker connection options and MQTT client',
    license='Apache-2.0',
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'sparkplug_check = sparkplug_client.presentation.main:main',
        ],
    },
)
